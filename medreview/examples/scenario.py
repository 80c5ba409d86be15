from typing import Any, Dict, List, Optional, Type, Union
from unittest import TestCase

from medreview.contract.medical_review import AnonymousMedicalReview
from medreview.transaction.types import AddressValue


def substitute_users(args, user_addresses: Dict[str, AddressValue]) -> List:
    """Replace user names by the corresponding address."""
    return [user_addresses[arg] if isinstance(arg, str) and arg in user_addresses else arg for arg in args]


class TransactionAssertion:
    def check_assertion(self, test: TestCase, contract: AnonymousMedicalReview, user_addresses: Dict[str, AddressValue]):
        pass


class StateValueAssertion(TransactionAssertion):
    def __init__(self, name: str, *args, attr: Optional[str] = None, expected_value) -> None:
        super().__init__()
        self.name = name
        self.args = args
        self.attr = attr
        self.expected = expected_value

    def check_assertion(self, test: TestCase, contract: AnonymousMedicalReview, user_addresses: Dict[str, AddressValue]):
        actual_val = getattr(contract, self.name)(*substitute_users(self.args, user_addresses))
        if self.attr is not None and actual_val is not None:
            actual_val = getattr(actual_val, self.attr)
        arg_str = ', '.join(str(a) for a in self.args)
        attr_str = '' if self.attr is None else f'.{self.attr}'
        test.assertEqual(self.expected, actual_val, f'Assertion {self.name}({arg_str}){attr_str} == {self.expected}')


class EventCountAssertion(TransactionAssertion):
    def __init__(self, event_name: str, expected_count: int) -> None:
        super().__init__()
        self.event_name = event_name
        self.expected = expected_count

    def check_assertion(self, test: TestCase, contract: AnonymousMedicalReview, user_addresses: Dict[str, AddressValue]):
        actual = sum(1 for e in contract.events if type(e).__name__ == self.event_name)
        test.assertEqual(self.expected, actual, f'Assertion #{self.event_name} == {self.expected}')


class DecryptedRatingAssertion(TransactionAssertion):
    """Check that a reviewer can read back one of the ratings of its own review."""

    def __init__(self, review_id: int, dimension: str, *, user: str, expected_value: int) -> None:
        super().__init__()
        self.review_id = review_id
        self.dimension = dimension
        self.user = user
        self.expected = expected_value

    def check_assertion(self, test: TestCase, contract: AnonymousMedicalReview, user_addresses: Dict[str, AddressValue]):
        handle = getattr(contract.get_review(self.review_id), self.dimension)
        actual = contract.gateway.user_decrypt(handle, user_addresses[self.user])
        test.assertEqual(self.expected, actual, f'Assertion review {self.review_id}.{self.dimension} == {self.expected}')


class Transaction:
    def __init__(self, user: str, name: str, *args: Any, expected_exception: Optional[Type[Exception]] = None):
        super().__init__()
        self.user = user
        self.name = name
        self.args = args
        self.expected_exception = expected_exception

    def __str__(self):
        return f"{self.name}({', '.join([str(arg) for arg in self.args])}){{user={self.user}}}"


class OracleDelivery:
    """The decryption gateway delivers the result of request_id (all pending requests if None)."""

    def __init__(self, request_id: Optional[int] = None, expected_exception: Optional[Type[Exception]] = None):
        self.request_id = request_id
        self.expected_exception = expected_exception

    def __str__(self):
        return f"fulfill({'all' if self.request_id is None else self.request_id})"


class TimeTravel:
    def __init__(self, seconds: int):
        self.seconds = seconds

    def __str__(self):
        return f'advance_time({self.seconds})'


Step = Union[Transaction, OracleDelivery, TimeTravel, TransactionAssertion]


class Scenario:
    def __init__(self, name: str):
        self._name = name
        self._users = None
        self._deployment_transaction = None
        self._steps: List[Step] = []

    def name(self):
        return self._name

    def users(self) -> List[str]:
        return self._users

    def deployment_transaction(self) -> Transaction:
        return self._deployment_transaction

    def steps(self) -> List[Step]:
        # Steps to execute in this order
        return self._steps


class ScenarioBuilder:
    def __init__(self, name: str) -> None:
        super().__init__()
        self.scenario = Scenario(name)

    def set_users(self, *users: str):
        self.scenario._users = list(users)
        return self

    def set_deployment_transaction(self, *, owner: str):
        assert self.scenario._deployment_transaction is None
        t = Transaction(owner, '')
        self.scenario._deployment_transaction = t
        return t

    def add_transaction(self, fname: str, args: Optional[List] = None, *, user: str, expected_exception=None):
        args = [] if args is None else args
        t = Transaction(user, fname, *args, expected_exception=expected_exception)
        self.scenario._steps.append(t)
        return t

    def add_fulfillment(self, request_id: Optional[int] = None, *, expected_exception=None):
        self.scenario._steps.append(OracleDelivery(request_id, expected_exception))
        return self

    def add_time_travel(self, seconds: int):
        self.scenario._steps.append(TimeTravel(seconds))
        return self

    def add_state_assertion(self, name: str, *args, attr: Optional[str] = None, expected_value):
        self.scenario._steps.append(StateValueAssertion(name, *args, attr=attr, expected_value=expected_value))
        return self

    def add_event_assertion(self, event_name: str, expected_count: int):
        self.scenario._steps.append(EventCountAssertion(event_name, expected_count))
        return self

    def add_decrypt_assertion(self, review_id: int, dimension: str, *, user: str, expected_value: int):
        self.scenario._steps.append(DecryptedRatingAssertion(review_id, dimension, user=user, expected_value=expected_value))
        return self

    def build(self) -> Scenario:
        assert self.scenario.users() is not None
        assert self.scenario.deployment_transaction() is not None
        return self.scenario
