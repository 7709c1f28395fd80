"""Tests for mapping engine errors to caller rejections."""

from unittest.mock import patch

from circle.adapter.error import GraphStoreError
from circle.domain.error import (
    AlreadyRequestedOrFriendsError,
    ConsistencyError,
    GroupNotFoundError,
    InvalidGroupAttributesError,
    UnauthorizedError,
)
from circle.interface.error import INTERNAL_ERROR, to_rejection


class TestToRejection:
    def test_validation_error_keeps_code_and_message(self):
        rejection = to_rejection(
            InvalidGroupAttributesError(["Description is required"])
        )

        assert rejection.code == "invalid_group_attributes"
        assert rejection.kind == "validation"
        assert "Description is required" in rejection.message

    def test_conflict_and_not_found_are_distinguishable(self):
        conflict = to_rejection(AlreadyRequestedOrFriendsError("a", "b"))
        missing = to_rejection(GroupNotFoundError("g"))

        assert (conflict.kind, conflict.code) == (
            "conflict",
            "already_requested_or_friends",
        )
        assert (missing.kind, missing.code) == ("not_found", "group_not_found")

    def test_unauthorized(self):
        rejection = to_rejection(UnauthorizedError("u", "remove members", "g"))

        assert rejection.kind == "unauthorized"
        assert rejection.code == "unauthorized"

    @patch("circle.interface.error.logfire")
    def test_consistency_error_is_hidden_and_logged(self, mock_logfire):
        rejection = to_rejection(ConsistencyError("member_count drift on g"))

        assert rejection == INTERNAL_ERROR
        mock_logfire.error.assert_called_once()

    @patch("circle.interface.error.logfire")
    def test_store_and_unexpected_errors_become_internal(self, mock_logfire):
        assert to_rejection(GraphStoreError("connection refused")) == INTERNAL_ERROR
        assert to_rejection(KeyError("boom")) == INTERNAL_ERROR
        assert mock_logfire.error.call_count == 2
