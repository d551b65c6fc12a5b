"""Question-answering app: anyone pays to ask the account owner, who answers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

from .chain import Account, BankSend, Chain, MessageInfo, Response, coins, must_pay, nonpayable
from .errors import (
    AccountOwnerMustBeSetToAnswer,
    InsufficientFunds,
    NotFound,
    OnlyAccountOwnerCanAnswer,
    QuestionNotFoundInUnansweredQuestions,
    StdError,
)
from .friend_tech import (
    FRIEND_TECH_APP_ID,
    FRIEND_TECH_APP_VERSION,
    BuyKeyCost,
    FriendTechApp,
    Issuer,
)

MY_NAMESPACE = "bull-market-lab"
QA_APP_NAME = "qa-app"
QA_APP_ID = f"{MY_NAMESPACE}:{QA_APP_NAME}"
APP_VERSION = "0.1.0"

INSTANTIATE_REPLY_ID = 1

DEFAULT_QUERY_LIMIT = 10
MAX_QUERY_LIMIT = 30

DEPENDENCIES = ((FRIEND_TECH_APP_ID, (FRIEND_TECH_APP_VERSION,)),)


@dataclass(frozen=True)
class QAAppInstantiateMsg:
    pass


@dataclass(frozen=True)
class QAAppMigrateMsg:
    pass


@dataclass(frozen=True)
class Ask:
    """Ask the account owner a question; the ask cost must be attached."""

    content: str


@dataclass(frozen=True)
class Answer:
    """Answer an unanswered question; only the account owner may send this."""

    question_id: int
    content: str


@dataclass(frozen=True)
class Stats:
    pass


@dataclass(frozen=True)
class AskCost:
    pass


@dataclass(frozen=True)
class AnsweredQuestions:
    limit: Optional[int] = None
    start_after: Optional[int] = None


@dataclass(frozen=True)
class UnansweredQuestions:
    limit: Optional[int] = None
    start_after: Optional[int] = None


@dataclass(frozen=True)
class QuestionQuery:
    id: int


ExecuteMsg = Union[Ask, Answer]
QueryMsg = Union[Stats, AskCost, AnsweredQuestions, UnansweredQuestions, QuestionQuery]


@dataclass(frozen=True)
class Question:
    id: int
    asker: str
    question_content: str
    answered: bool
    answer_content: Optional[str] = None


@dataclass(frozen=True)
class StatsResponse:
    total_question_count: int


@dataclass(frozen=True)
class AskCostResponse:
    fee_denom: str
    cost: int
    ask_fee_collector: str


@dataclass(frozen=True)
class QuestionsResponse:
    question_ids: list[int]


@dataclass(frozen=True)
class QuestionResponse:
    question: Question


def _page(ids: list[int], limit: Optional[int], start_after: Optional[int]) -> QuestionsResponse:
    take = min(DEFAULT_QUERY_LIMIT if limit is None else limit, MAX_QUERY_LIMIT)
    ordered = sorted(ids)
    if start_after is not None:
        ordered = [i for i in ordered if i > start_after]
    return QuestionsResponse(ordered[: max(take, 0)])


class QAApp:
    """The question-answering app installed on one account, priced by a key-trading app."""

    module_id = QA_APP_ID
    version = APP_VERSION

    def __init__(
        self,
        chain: Chain,
        account: Account,
        friend_tech: FriendTechApp,
        address: Optional[str] = None,
    ) -> None:
        self.chain = chain
        self.account = account
        self.friend_tech = friend_tech
        self.address = address or chain.addr_make(f"{account.address}/{QA_APP_ID}")
        self._next_question_id: Optional[int] = None
        self._unanswered: dict[int, Question] = {}
        self._answered: dict[int, Question] = {}

    def _account_owner(self) -> str:
        if self.account.owner is None:
            raise AccountOwnerMustBeSetToAnswer()
        return self.chain.validate_address(self.account.owner)

    @property
    def _loaded_next_id(self) -> int:
        if self._next_question_id is None:
            raise NotFound("NextQuestionId")
        return self._next_question_id

    def _response(self, action: str) -> Response:
        return (
            Response()
            .add_attribute("contract", self.module_id)
            .add_attribute("action", action)
        )

    def _check_dependencies(self) -> None:
        for module_id, versions in DEPENDENCIES:
            if self.friend_tech.module_id != module_id:
                raise StdError(f"Dependency {module_id} not installed")
            if self.friend_tech.version not in versions:
                raise StdError(
                    f"Dependency {module_id} version {self.friend_tech.version} not supported"
                )

    # --- entry points --------------------------------------------------

    def instantiate(self, info: MessageInfo, msg: QAAppInstantiateMsg) -> Response:
        self._check_dependencies()
        owner = self._account_owner()
        self._next_question_id = 0
        self._unanswered = {}
        self._answered = {}
        return (
            Response()
            .add_attribute("action", "instantiate")
            .add_attribute("account_owner", owner)
        )

    def execute(self, info: MessageInfo, msg: ExecuteMsg) -> Response:
        if isinstance(msg, Ask):
            return self._ask(info, msg.content)
        if isinstance(msg, Answer):
            return self._answer(info, msg.question_id, msg.content)
        raise TypeError(f"unknown execute message: {msg!r}")

    def query(self, msg: QueryMsg):
        """Answer a query message with its response object."""
        if isinstance(msg, Stats):
            return StatsResponse(self._loaded_next_id)
        if isinstance(msg, AskCost):
            return self.ask_cost()
        if isinstance(msg, AnsweredQuestions):
            return _page(list(self._answered), msg.limit, msg.start_after)
        if isinstance(msg, UnansweredQuestions):
            return _page(list(self._unanswered), msg.limit, msg.start_after)
        if isinstance(msg, QuestionQuery):
            question = self._unanswered.get(msg.id) or self._answered.get(msg.id)
            if question is None:
                raise NotFound("Question not found")
            return QuestionResponse(question)
        raise TypeError(f"unknown query message: {msg!r}")

    def migrate(self, msg: QAAppMigrateMsg) -> Response:
        return self._response("migrate")

    def reply(self, reply_id: int) -> Response:
        if reply_id == INSTANTIATE_REPLY_ID:
            return self._response("instantiate_reply")
        raise StdError(f"Reply handler with id {reply_id} not found")

    def ask_cost(self) -> AskCostResponse:
        """Cost of asking: the price of one key of the account owner, with fee."""
        issuer = self.friend_tech.query(Issuer())
        cost = self.friend_tech.query(BuyKeyCost(1))
        return AskCostResponse(
            fee_denom=issuer.fee_denom,
            cost=cost.total_cost,
            ask_fee_collector=issuer.issuer_fee_collector,
        )

    # --- handlers ------------------------------------------------------

    def _ask(self, info: MessageInfo, content: str) -> Response:
        asker = info.sender
        cost = self.ask_cost()
        paid = must_pay(info, cost.fee_denom)
        if cost.cost > paid:
            raise InsufficientFunds(required=cost.cost, paid=paid)

        question_id = self._loaded_next_id
        self._unanswered[question_id] = Question(
            id=question_id,
            asker=asker,
            question_content=content,
            answered=False,
            answer_content=None,
        )
        self._next_question_id = question_id + 1

        return (
            self._response("ask")
            .add_message(BankSend(cost.ask_fee_collector, coins(cost.cost, cost.fee_denom)))
            .add_attribute("asker", asker)
            .add_attribute("question_id", question_id)
            .add_attribute("question_content", content)
            .add_attribute("cost", cost.cost)
            .add_attribute("fee_denom", cost.fee_denom)
            .add_attribute("ask_fee_collector", cost.ask_fee_collector)
        )

    def _answer(self, info: MessageInfo, question_id: int, content: str) -> Response:
        nonpayable(info)
        if info.sender != self._account_owner():
            raise OnlyAccountOwnerCanAnswer()
        question = self._unanswered.get(question_id)
        if question is None:
            raise QuestionNotFoundInUnansweredQuestions(question_id)

        del self._unanswered[question_id]
        self._answered[question.id] = replace(
            question, answered=True, answer_content=content
        )

        return (
            self._response("answer")
            .add_attribute("asker", question.asker)
            .add_attribute("question_id", question_id)
            .add_attribute("answer_content", content)
        )