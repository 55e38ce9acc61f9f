"""Entity records of the city model."""

from citysim.core.handle import EntityClass
from citysim.core.role import Role
from citysim.roles.aggregates import Aggregates
from citysim.roles.aims import Aims
from citysim.roles.buildings import Buildings
from citysim.roles.job import Job
from citysim.roles.resources import Resources
from citysim.roles.stats import Stats

ROLE_BY_CLASS: dict[EntityClass, type[Role]] = {
    EntityClass.JOB: Job,
    EntityClass.RESOURCES: Resources,
    EntityClass.STATS: Stats,
    EntityClass.AGGREGATES: Aggregates,
    EntityClass.BUILDINGS: Buildings,
    EntityClass.AIMS: Aims,
}

__all__ = [
    "Aggregates",
    "Aims",
    "Buildings",
    "Job",
    "ROLE_BY_CLASS",
    "Resources",
    "Stats",
]
