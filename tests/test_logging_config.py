import logging

from helpdesk.utils.logging_config import LOG_FORMAT, logger, setup_logging


def test_repeated_setup_keeps_a_single_handler():
    first = setup_logging("helpdesk.tests.repeat")
    second = setup_logging("helpdesk.tests.repeat")

    assert first is second
    assert len(second.handlers) == 1
    assert second.handlers[0].formatter._fmt == LOG_FORMAT


def test_debug_flag_lowers_the_level():
    assert setup_logging("helpdesk.tests.debug", debug=True).level == logging.DEBUG
    assert setup_logging("helpdesk.tests.quiet", debug=False).level == logging.INFO


def test_application_logger_is_named_helpdesk():
    assert logger.name == "helpdesk"
    assert len(logger.handlers) == 1
