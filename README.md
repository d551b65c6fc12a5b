# keyboard_qa

An in-memory model of two cooperating on-chain apps:

- **Friend tech app** (`keyboard_qa.friend_tech`): an account owner issues
  "keys" that anyone can buy or sell along a quadratic bonding curve. Every
  trade pays a 5% issuer fee to a fee collector.
- **Q&A app** (`keyboard_qa.qa`): anyone can pay to ask the account owner a
  question. Asking costs the same as buying one key, fee included, and the
  payment goes to the key issuer's fee collector. Only the owner can answer.

Both run against a simulated `Chain` (`keyboard_qa.chain`). It keeps bank
balances, creates accounts, makes and validates bech32-style addresses, and
dispatches contract calls.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Pricing

`keyboard_qa.pricing` holds the curve:

```python
from keyboard_qa.pricing import calculate_buy_price, calculate_sell_price, multiply_percentage

price = calculate_buy_price(1, 10)       # cost of 10 keys when supply is 1
fee = multiply_percentage(price, 5)       # 5% of price, rounded down
calculate_sell_price(11, 10) == price     # selling the same keys back pays the same
```

All amounts are non-negative integers up to 2**128 - 1. Arguments of the
wrong type raise `TypeError`, arguments out of range raise `ValueError`, and
an intermediate result that goes below zero or above the limit raises
`OverflowError`.

## Using the apps

```python
from keyboard_qa.chain import Chain, coins
from keyboard_qa.friend_tech import (
    FriendTechApp, FriendTechAppInstantiateMsg, BuyKey, SellKey, Issuer, Holders, Holding,
)

chain = Chain()                       # addresses use the prefix "mock"
owner = chain.addr_make("owner")
account = chain.create_account(owner)
app = FriendTechApp(chain, account)
chain.instantiate(
    app,
    owner,
    FriendTechAppInstantiateMsg(username="test", issuer_fee_collector=owner, fee_denom="ucosm"),
)

buyer = chain.addr_make("user1")
cost = app.buy_key_cost(10)
chain.set_balance(buyer, coins(cost.total_cost, "ucosm"))
chain.execute(app, buyer, BuyKey(amount=10), coins(cost.total_cost, "ucosm"))

app.query(Issuer()).supply            # 11
app.query(Holders()).holders          # holder addresses, sorted
app.query(Holding(buyer)).amount      # 10
```

On instantiation the account owner holds the first key and the supply is 1.
A buyer attaches at least `total_cost` (price plus issuer fee); the issuer fee
is sent to the fee collector and the rest stays with the app. To sell, the
seller attaches the `total_cost` from `app.sell_key_cost(amount)`, which is
the issuer fee alone, and is paid the price by the app. The owner cannot sell
their last key. `Holders` takes optional `limit` (default 10, at most 30) and
`start_after`.

The Q&A app depends on a friend tech app on the same account:

```python
from keyboard_qa.qa import QAApp, QAAppInstantiateMsg, Ask, Answer, Stats, UnansweredQuestions, QuestionQuery

qa = QAApp(chain, account, app)
chain.instantiate(qa, owner, QAAppInstantiateMsg())
cost = qa.ask_cost()
chain.set_balance(buyer, coins(cost.cost, cost.fee_denom))
chain.execute(qa, buyer, Ask(content="this is a question"), coins(cost.cost, cost.fee_denom))
qa.query(UnansweredQuestions()).question_ids     # [0]
chain.execute(qa, owner, Answer(question_id=0, content="this is an answer"))
qa.query(Stats()).total_question_count           # 1
qa.query(QuestionQuery(0)).question.answer_content  # "this is an answer"
```

Both apps also accept a migrate message (`migrate`) and a reply with id 1
(`reply`), which return a response carrying only the app's id and the action.

## Errors

Failures raise exceptions from `keyboard_qa.errors`: `InsufficientFunds`,
`CannotSellMoreThanOwned`, `IssuerCannotSellLastKey`,
`AccountOwnerMustBeSetToIssueKey`, `AccountOwnerMustBeSetToAnswer`,
`OnlyAccountOwnerCanAnswer` and `QuestionNotFoundInUnansweredQuestions`.
Missing or wrong funds raise `PaymentError`; invalid addresses, missing
balances and unknown reply ids raise `StdError`; an unknown question or
state read before instantiation raises `NotFound`. When `Chain.instantiate`
or `Chain.execute` fails, all balances are restored to what they were before
the call.

## What this package does not do

Everything lives in memory for the life of the Python objects. There is no
persistent storage, no connection to a real network, no publishing or
installing of apps on a live chain, and no command-line tool.