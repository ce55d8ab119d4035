import logging

from docexport._utils import log_context, temp_log_level


def test_temp_log_level_restores_level():
    logger = logging.getLogger("docexport.tests.helpers")
    logger.setLevel(logging.WARNING)
    with temp_log_level(logger, logging.DEBUG):
        assert logger.level == logging.DEBUG
    assert logger.level == logging.WARNING


def test_log_context_debug_takes_precedence():
    logger = logging.getLogger("docexport.tests.context")
    logger.setLevel(logging.WARNING)
    with log_context(logger, verbose=True, debug=True):
        assert logger.level == logging.DEBUG
    with log_context(logger, verbose=True):
        assert logger.level == logging.INFO
    with log_context(logger):
        assert logger.level == logging.WARNING
    assert logger.level == logging.WARNING
