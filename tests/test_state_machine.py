import pytest

from Applications import state_machine as fsm
from Applications.exceptions import InvalidTransition


class TestTransitions:

    @pytest.mark.parametrize("status", [fsm.DRAFT, fsm.RESENT])
    def test_submit_from_editable_statuses(self, status):
        assert fsm.next_status(status, fsm.SUBMIT) == fsm.SUBMITTED

    @pytest.mark.parametrize("status", [fsm.SUBMITTED, fsm.UNDER_REVIEW])
    def test_review_actions_from_open_statuses(self, status):
        assert fsm.next_status(status, fsm.ASSIGN) == fsm.UNDER_REVIEW
        assert fsm.next_status(status, fsm.APPROVE) == fsm.APPROVED
        assert fsm.next_status(status, fsm.REJECT) == fsm.REJECTED
        assert fsm.next_status(status, fsm.REQUEST_INFO) == fsm.RESENT

    @pytest.mark.parametrize("status", sorted(fsm.TERMINAL_STATUSES))
    @pytest.mark.parametrize("action", fsm.ACTIONS)
    def test_terminal_statuses_reject_every_action(self, status, action):
        with pytest.raises(InvalidTransition):
            fsm.next_status(status, action)

    def test_draft_cannot_be_approved(self):
        with pytest.raises(InvalidTransition) as excinfo:
            fsm.next_status(fsm.DRAFT, fsm.APPROVE)

        assert excinfo.value.status_code == 400
        assert excinfo.value.current_status == fsm.DRAFT
        assert "draft" in str(excinfo.value.detail)

    def test_submitted_cannot_be_submitted_again(self):
        assert not fsm.can(fsm.SUBMITTED, fsm.SUBMIT)


class TestHelpers:

    def test_allowed_actions(self):
        assert fsm.allowed_actions(fsm.DRAFT) == [fsm.SUBMIT]
        assert fsm.allowed_actions(fsm.APPROVED) == []
        assert set(fsm.allowed_actions(fsm.SUBMITTED)) == {
            fsm.ASSIGN, fsm.APPROVE, fsm.REJECT, fsm.REQUEST_INFO,
        }

    def test_every_decision_status_maps_to_a_transition(self):
        for status, action in fsm.STATUS_ACTIONS.items():
            assert fsm.next_status(fsm.UNDER_REVIEW, action) == status
