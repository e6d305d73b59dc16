"""
Unit tests for the object comparer (neat_comparer/comparison/object_comparer.py)

Tests cover:
- compare() ordering and length
- get_differences() as the differing subset of compare()
- new_including_only_differences() for same-type and cross-type comparers
- Target type guard and descriptor validation
- Failure propagation without partial results
- Failure logging once per public call, respecting host log levels
"""

import json
import logging
from unittest.mock import Mock

import pytest

from neat_comparer.comparison.exceptions import (
    AbsentValueError,
    DescriptorConfigurationError,
    InvalidTargetTypeError,
)
from neat_comparer.comparison.object_comparer import ObjectComparer, SameTypeObjectComparer
from neat_comparer.comparison.property_comparison import (
    PropertyComparison,
    SameTypePropertyComparison,
)
from tests.sample_models import (
    Batch,
    FirstToCompare,
    RenamedToCompare,
    SecondToCompare,
    Temperature,
)


@pytest.fixture
def same_type_comparer():
    return SameTypeObjectComparer(
        FirstToCompare,
        [
            SameTypePropertyComparison(FirstToCompare, "a_property"),
            SameTypePropertyComparison(FirstToCompare, "b_property"),
        ],
    )


@pytest.fixture
def cross_type_comparer():
    return ObjectComparer(
        FirstToCompare,
        SecondToCompare,
        [
            PropertyComparison(FirstToCompare, SecondToCompare, "a_property"),
            PropertyComparison(FirstToCompare, SecondToCompare, "b_property"),
        ],
    )


class TestConstruction:
    """Comparer construction and descriptor validation"""

    def test_comparisons_kept_in_order(self):
        comparisons = [
            SameTypePropertyComparison(FirstToCompare, "b_property"),
            SameTypePropertyComparison(FirstToCompare, "a_property"),
        ]

        comparer = SameTypeObjectComparer(FirstToCompare, comparisons)

        assert comparer.comparisons == tuple(comparisons)
        assert len(comparer) == 2

    def test_comparisons_copied_from_source(self):
        comparisons = [SameTypePropertyComparison(FirstToCompare, "b_property")]
        comparer = SameTypeObjectComparer(FirstToCompare, comparisons)

        comparisons.append(SameTypePropertyComparison(FirstToCompare, "a_property"))

        assert len(comparer) == 1

    def test_accepts_generator(self):
        comparer = SameTypeObjectComparer(
            FirstToCompare,
            (SameTypePropertyComparison(FirstToCompare, name) for name in ["a_property"]),
        )
        assert len(comparer) == 1

    def test_is_same_type(self, same_type_comparer, cross_type_comparer):
        assert same_type_comparer.is_same_type is True
        assert cross_type_comparer.is_same_type is False

    def test_descriptor_for_other_types_rejected(self):
        with pytest.raises(DescriptorConfigurationError, match="does not compare"):
            ObjectComparer(
                FirstToCompare,
                SecondToCompare,
                [SameTypePropertyComparison(FirstToCompare, "b_property")],
            )

    def test_empty_comparer(self):
        comparer = SameTypeObjectComparer(FirstToCompare, [])

        assert comparer.compare(FirstToCompare(), FirstToCompare()) == []
        assert comparer.get_differences(FirstToCompare(), FirstToCompare()) == []


class TestCompare:
    """compare() runs every descriptor in order"""

    def test_one_result_per_descriptor_in_order(self, same_type_comparer):
        results = same_type_comparer.compare(
            FirstToCompare("Test", 1), FirstToCompare("Test", 5000)
        )

        assert [result.first_property_name for result in results] == [
            "a_property",
            "b_property",
        ]
        assert [result.has_difference for result in results] == [False, True]

    def test_fresh_results_each_call(self, same_type_comparer):
        first = same_type_comparer.compare(FirstToCompare("Test", 1), FirstToCompare("Test", 2))
        second = same_type_comparer.compare(FirstToCompare("Test", 1), FirstToCompare("Test", 1))

        assert first is not second
        assert first[1].has_difference is True
        assert second[1].has_difference is False

    def test_builtin_generic_fields(self):
        comparer = SameTypeObjectComparer(
            Batch,
            [
                SameTypePropertyComparison(Batch, "counts"),
                SameTypePropertyComparison(Batch, "labels"),
            ],
        )

        results = comparer.compare(Batch([1, 2], {"a": 1}), Batch([1, 3], {"a": 1}))

        assert [result.has_difference for result in results] == [True, False]

    def test_failure_aborts_without_partial_results(self):
        after_failure = Mock(return_value=True)
        comparer = SameTypeObjectComparer(
            FirstToCompare,
            [
                SameTypePropertyComparison(FirstToCompare, "a_property"),
                SameTypePropertyComparison(FirstToCompare, "b_property", after_failure),
            ],
        )

        with pytest.raises(AbsentValueError):
            comparer.compare(FirstToCompare(None, 1), FirstToCompare("Test", 1))

        after_failure.assert_not_called()


class TestGetDifferences:
    """get_differences() filters compare() results"""

    def test_no_differences(self, same_type_comparer):
        differences = same_type_comparer.get_differences(
            FirstToCompare("Test", 5000), FirstToCompare("Test", 5000)
        )
        assert differences == []

    def test_subset_of_compare(self, same_type_comparer):
        first = FirstToCompare("Test", 1)
        second = FirstToCompare("Other", 5000)

        compared = same_type_comparer.compare(first, second)
        differences = same_type_comparer.get_differences(first, second)

        assert differences == [result for result in compared if result.has_difference]
        assert [result.first_property_name for result in differences] == [
            "a_property",
            "b_property",
        ]

    def test_cross_type_differences(self, cross_type_comparer):
        differences = cross_type_comparer.get_differences(
            FirstToCompare("Test", 1), SecondToCompare("Test", 5000)
        )

        assert len(differences) == 1
        assert differences[0].first_property_name == "b_property"
        assert differences[0].first_value == 1
        assert differences[0].second_value == 5000


class TestNewIncludingOnlyDifferences:
    """Sparse diff instances"""

    def test_same_type_writes_second_values(self, same_type_comparer):
        result = same_type_comparer.new_including_only_differences(
            FirstToCompare, FirstToCompare("Test", 1), FirstToCompare("Test", 5000)
        )

        assert isinstance(result, FirstToCompare)
        assert result.a_property is None
        assert result.b_property == 5000

    def test_same_type_no_differences_gives_defaults(self, same_type_comparer):
        result = same_type_comparer.new_including_only_differences(
            FirstToCompare, FirstToCompare("Test", 5), FirstToCompare("Test", 5)
        )
        assert result == FirstToCompare()

    def test_cross_type_first_target_writes_first_values(self, cross_type_comparer):
        result = cross_type_comparer.new_including_only_differences(
            FirstToCompare, FirstToCompare("Test", 1), SecondToCompare("Test", 5000)
        )

        assert isinstance(result, FirstToCompare)
        assert result.a_property is None
        assert result.b_property == 1

    def test_cross_type_second_target_writes_second_values(self, cross_type_comparer):
        result = cross_type_comparer.new_including_only_differences(
            SecondToCompare, FirstToCompare("Test", 1), SecondToCompare("Test", 5000)
        )

        assert isinstance(result, SecondToCompare)
        assert result.a_property is None
        assert result.b_property == 5000

    def test_cross_type_renamed_properties(self):
        comparer = ObjectComparer(
            FirstToCompare,
            RenamedToCompare,
            [
                PropertyComparison.between(
                    FirstToCompare,
                    RenamedToCompare,
                    "b_property",
                    "amount",
                    lambda f, s: f.b_property == s.amount,
                )
            ],
        )

        result = comparer.new_including_only_differences(
            RenamedToCompare, FirstToCompare("Test", 1), RenamedToCompare("Test", 7)
        )

        assert result == RenamedToCompare(title=None, amount=7)

    def test_invalid_target_type(self, cross_type_comparer):
        with pytest.raises(InvalidTargetTypeError, match="Target type must be"):
            cross_type_comparer.new_including_only_differences(
                RenamedToCompare, FirstToCompare("Test", 1), SecondToCompare("Test", 5000)
            )

    def test_invalid_target_checked_before_comparing(self):
        predicate = Mock(return_value=False)
        comparer = SameTypeObjectComparer(
            FirstToCompare, [SameTypePropertyComparison(FirstToCompare, "b_property", predicate)]
        )

        with pytest.raises(InvalidTargetTypeError):
            comparer.new_including_only_differences(
                SecondToCompare, FirstToCompare(), FirstToCompare()
            )

        predicate.assert_not_called()

    def test_invalid_target_is_type_error(self, same_type_comparer):
        with pytest.raises(TypeError):
            same_type_comparer.new_including_only_differences(
                dict, FirstToCompare(), FirstToCompare()
            )

    def test_subclass_target_rejected(self, same_type_comparer):
        class DerivedToCompare(FirstToCompare):
            pass

        with pytest.raises(InvalidTargetTypeError):
            same_type_comparer.new_including_only_differences(
                DerivedToCompare, FirstToCompare(), FirstToCompare()
            )

    def test_read_only_property_write_fails(self):
        comparer = SameTypeObjectComparer(
            Temperature, [SameTypePropertyComparison(Temperature, "fahrenheit")]
        )

        with pytest.raises(AttributeError, match="read-only"):
            comparer.new_including_only_differences(Temperature, Temperature(0.0), Temperature(10.0))

    def test_property_setter_used(self):
        comparer = SameTypeObjectComparer(
            Temperature, [SameTypePropertyComparison(Temperature, "celsius")]
        )

        result = comparer.new_including_only_differences(
            Temperature, Temperature(0.0), Temperature(10.0)
        )

        assert result.celsius == 10.0


class _RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


class TestFailureLogging:
    """Failures are logged once, at the level the host application allows."""

    @pytest.fixture
    def comparer_logger(self):
        module_logger = logging.getLogger("neat_comparer.comparison.object_comparer")
        original_level = module_logger.level
        handler = _RecordingHandler()
        module_logger.addHandler(handler)
        yield module_logger, handler
        module_logger.removeHandler(handler)
        module_logger.setLevel(original_level)

    def test_host_level_survives_compare(self, same_type_comparer, comparer_logger):
        module_logger, handler = comparer_logger
        module_logger.setLevel(logging.CRITICAL)

        with pytest.raises(AbsentValueError):
            same_type_comparer.compare(FirstToCompare(None, 1), FirstToCompare("Test", 1))

        assert module_logger.level == logging.CRITICAL
        assert handler.records == []

    def test_new_including_only_differences_failure_logged_once(
        self, same_type_comparer, comparer_logger
    ):
        module_logger, handler = comparer_logger
        module_logger.setLevel(logging.WARNING)

        with pytest.raises(AbsentValueError):
            same_type_comparer.new_including_only_differences(
                FirstToCompare, FirstToCompare(None, 1), FirstToCompare("Test", 1)
            )

        errors = [json.loads(r.getMessage()) for r in handler.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0]["operation"] == "new_including_only_differences"
        assert errors[0]["error"].startswith("AbsentValueError")

    def test_get_differences_failure_logged_once(self, same_type_comparer, comparer_logger):
        module_logger, handler = comparer_logger
        module_logger.setLevel(logging.WARNING)

        with pytest.raises(AbsentValueError):
            same_type_comparer.get_differences(FirstToCompare(None, 1), FirstToCompare("Test", 1))

        errors = [r for r in handler.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert json.loads(errors[0].getMessage())["operation"] == "get_differences"
