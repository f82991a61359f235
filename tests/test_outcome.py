"""Tests for the outcome builder."""

import dataclasses
import itertools

import pytest

from pbx_dialplan.outcome import (
    External,
    FailureReason,
    Internal,
    build_outcome,
    failed,
)

TARGETS = [None, Internal(501), External("74951234567")]
TRUNKS = [None, "79235253998"]
FAILURES = [None, *FailureReason]


class TestBuildOutcome:
    @pytest.mark.parametrize(
        "target,trunk,failure",
        list(itertools.product(TARGETS, TRUNKS, FAILURES)),
    )
    def test_flags_match_target(self, target, trunk, failure):
        if (target is None) == (failure is None):
            with pytest.raises(ValueError):
                build_outcome(target, trunk, failure)
            return

        outcome = build_outcome(target, trunk, failure)
        assert outcome.target == target
        assert outcome.success is (target is not None)
        assert outcome.internal is isinstance(target, Internal)
        assert outcome.failure == failure
        if isinstance(target, External):
            assert outcome.trunk == trunk
        else:
            assert outcome.trunk is None

    def test_internal_drops_trunk(self):
        outcome = build_outcome(Internal(502), trunk="79235253998")
        assert outcome.success and outcome.internal
        assert outcome.trunk is None

    def test_external_keeps_trunk(self):
        outcome = build_outcome(External("74951234567"), trunk="79235253998")
        assert outcome.success and not outcome.internal
        assert outcome.trunk == "79235253998"

    def test_rejects_non_target(self):
        with pytest.raises(ValueError, match="Not a route target"):
            build_outcome("501")

    def test_failed_shorthand(self):
        outcome = failed(FailureReason.SHORT_CODE_NOT_MAPPED)
        assert not outcome.success
        assert not outcome.internal
        assert outcome.target is None
        assert outcome.failure is FailureReason.SHORT_CODE_NOT_MAPPED

    def test_outcome_frozen(self):
        outcome = build_outcome(Internal(501))
        with pytest.raises(dataclasses.FrozenInstanceError):
            outcome.success = False
