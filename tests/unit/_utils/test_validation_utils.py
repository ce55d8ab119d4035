import math

import pytest

from docexport._utils import validate_positive_number, validate_string_flag
from docexport.errors import ConfigurationError


# tests for validate_string_flag

def test_validate_string_flag_positive_case():
    validate_string_flag(arg="a4", supported_values=("a4", "letter", "legal"),
                         err_msg="my_error_message")

def test_validate_string_flag_negative_case():
    with pytest.raises(ConfigurationError, match="my_error_message"):
        validate_string_flag(arg="a5", supported_values=("a4", "letter", "legal"),
                             err_msg="my_error_message")

def test_validate_string_flag_unhashable_arg():
    with pytest.raises(ValueError, match="my_error_message"):
        validate_string_flag(arg=["a4"], supported_values=("a4",),
                             err_msg="my_error_message")

# tests for validate_positive_number

@pytest.mark.parametrize("value", [1, 0.5, 10 ** 6])
def test_validate_positive_number_positive_case(value):
    validate_positive_number(value, err_msg="my_error_message")

def test_validate_positive_number_allow_zero():
    validate_positive_number(0, err_msg="my_error_message", allow_zero=True)
    with pytest.raises(ConfigurationError, match="my_error_message"):
        validate_positive_number(0, err_msg="my_error_message")

@pytest.mark.parametrize(
    "value", [-1, math.inf, math.nan, "5", None, True, [1]]
)
def test_validate_positive_number_negative_case(value):
    with pytest.raises(ConfigurationError, match="my_error_message"):
        validate_positive_number(value, err_msg="my_error_message", allow_zero=True)
