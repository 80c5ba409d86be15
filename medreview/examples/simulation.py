from contextlib import nullcontext
from typing import Dict, Optional
from unittest import TestCase

from medreview import my_logging
from medreview.config import mr_print, mr_print_banner
from medreview.contract.deployment import deploy_contract
from medreview.contract.medical_review import AnonymousMedicalReview
from medreview.examples.scenario import Scenario, Transaction, OracleDelivery, TimeTravel, TransactionAssertion, \
    substitute_users
from medreview.my_logging.log_context import log_context
from medreview.transaction.runtime import Runtime
from medreview.transaction.types import AddressValue


class ScenarioSimulator:
    """
    Execute a scenario against a freshly deployed contract on the configured runtime backends.

    Assertions and expected exceptions are checked with test. Outside of a test run, a plain TestCase instance
    is used, failed checks then surface as AssertionError.
    """

    def __init__(self, scenario: Scenario, test: Optional[TestCase] = None):
        self.scenario = scenario
        self.test = TestCase() if test is None else test
        self.contract: Optional[AnonymousMedicalReview] = None
        self.user_addresses: Dict[str, AddressValue] = {}

    def run(self) -> AnonymousMedicalReview:
        Runtime.reset()
        mr_print_banner(f'Scenario {self.scenario.name()}')
        with log_context(self.scenario.name()):
            ledger = Runtime.blockchain()

            # Create dummy users
            user_names = self.scenario.users()
            addresses = ledger.create_test_accounts(len(user_names))
            self.user_addresses = {name: address for name, address in zip(user_names, addresses)}

            owner = self.scenario.deployment_transaction().user
            self.contract = deploy_contract(self.user_addresses[owner])

            for step in self.scenario.steps():
                self._execute(step)
        return self.contract

    def _execute(self, step):
        if isinstance(step, TransactionAssertion):
            step.check_assertion(self.test, self.contract, self.user_addresses)
            return

        mr_print(f'Step: {step}')
        my_logging.debug(f'Scenario {self.scenario.name()} step {step}')
        if isinstance(step, TimeTravel):
            self.contract.ledger.advance_time(step.seconds)
            return

        exception = step.expected_exception
        with nullcontext() if exception is None else self.test.assertRaises(exception):
            if isinstance(step, OracleDelivery):
                if step.request_id is None:
                    self.contract.gateway.fulfill_pending()
                else:
                    self.contract.gateway.fulfill(step.request_id)
            else:
                assert isinstance(step, Transaction)
                transact = getattr(self.contract, step.name)
                transact(*substitute_users(step.args, self.user_addresses), user=self.user_addresses[step.user])
