"""Tests for logging configuration and behavior."""

import logging as std_logging

from citysim import Simulation
from citysim.logging import DEEP_DEBUG, CityLogger, getLogger, level_from_name


class TestCityLogger:
    def test_logger_class(self):
        assert isinstance(getLogger("citysim.test.class"), CityLogger)

    def test_deep_level_registered(self):
        assert DEEP_DEBUG == 5
        assert std_logging.getLevelName(DEEP_DEBUG) == "DEEP"

    def test_deep_logging_when_enabled(self, caplog):
        logger = getLogger("test.deep")
        logger.setLevel(DEEP_DEBUG)

        with caplog.at_level(DEEP_DEBUG, logger="test.deep"):
            logger.deep("Deep debug message")

        assert "Deep debug message" in caplog.text

    def test_deep_logging_when_disabled(self, caplog):
        logger = getLogger("test.deep_disabled")
        logger.setLevel(std_logging.INFO)

        with caplog.at_level(std_logging.INFO, logger="test.deep_disabled"):
            logger.deep("Should not appear")

        assert "Should not appear" not in caplog.text


def test_level_from_name():
    assert level_from_name("deep_debug") == DEEP_DEBUG
    assert level_from_name("DEBUG") == std_logging.DEBUG
    assert level_from_name("warning") == std_logging.WARNING


def test_simulation_configures_levels():
    Simulation.init(
        logging={"default_level": "WARNING", "events": {"update_jobs": "DEEP_DEBUG"}}
    )

    assert std_logging.getLogger("citysim").level == std_logging.WARNING
    assert std_logging.getLogger("citysim.events.update_jobs").level == DEEP_DEBUG


def test_event_logger_name(city):
    assert city.get_event("update_jobs").get_logger().name == "citysim.events.update_jobs"


def test_invariant_violation_is_logged(city, caplog):
    city.set("resources", "food", -50.0)
    city.set("resources", "food_spoilage", 1.0)

    with caplog.at_level(std_logging.WARNING, logger="citysim"):
        import warnings

        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            city.step()

    assert "resources.food" in caplog.text
