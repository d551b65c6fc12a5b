"""Error types raised by the key-trading and question-answering apps."""

from __future__ import annotations


class _Error(Exception):
    """Exception compared by type and arguments, rendered from a template."""

    _template: str = ""

    def __str__(self) -> str:
        if self._template:
            return self._template.format(*self.args)
        return super().__str__()

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class StdError(_Error):
    """Failure in storage access, address handling or bank transfers."""

    def __init__(self, message: str) -> None:
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class NotFound(StdError):
    """A stored item that was looked up does not exist."""

    _template = "{0} not found"

    def __init__(self, kind: str) -> None:
        super().__init__(kind)
        self.kind = kind


class PaymentError(_Error):
    """The funds attached to a message do not match what it requires."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class FriendTechAppError(_Error):
    """Base class of errors raised by the key-trading app."""


class QAAppError(_Error):
    """Base class of errors raised by the question-answering app."""


class AccountOwnerMustBeSetToIssueKey(FriendTechAppError):
    _template = "Account owner must be set to issue key"


class InsufficientFunds(FriendTechAppError, QAAppError):
    """Less was paid than the operation costs."""

    _template = "Insufficient funds, required: {0}, paid: {1}"

    def __init__(self, required: int, paid: int) -> None:
        super().__init__(required, paid)
        self.required = required
        self.paid = paid


class CannotSellMoreThanOwned(FriendTechAppError):
    _template = "Cannot sell more than owned, owned: {0}, to sell: {1}"

    def __init__(self, owned: int, to_sell: int) -> None:
        super().__init__(owned, to_sell)
        self.owned = owned
        self.to_sell = to_sell


class IssuerCannotSellLastKey(FriendTechAppError):
    _template = "Issuer cannot sell last key"


class AccountOwnerMustBeSetToAnswer(QAAppError):
    _template = "Account owner must be set to answer any question"


class OnlyAccountOwnerCanAnswer(QAAppError):
    _template = "Only account owner can answer the question"


class QuestionNotFoundInUnansweredQuestions(QAAppError):
    _template = "Question not found in unanswered questions, question_id: {0}"

    def __init__(self, question_id: int) -> None:
        super().__init__(question_id)
        self.question_id = question_id