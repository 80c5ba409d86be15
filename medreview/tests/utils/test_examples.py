from parameterized import parameterized_class

from medreview.config import cfg
from medreview.examples.example_scenarios import all_scenarios, get_scenario
from medreview.examples.scenario import Scenario, Transaction, TransactionAssertion, OracleDelivery, TimeTravel
from medreview.contract.medical_review import AnonymousMedicalReview
from medreview.tests.medreview_unit_test import MedReviewTestCase


class TestScenario(MedReviewTestCase):
    name: str = None
    scenario: Scenario = None


@parameterized_class(('name', 'scenario'), all_scenarios)
class TestScenarioStructure(TestScenario):

    def test_name(self):
        self.assertEqual(self.name, self.scenario.name())
        self.assertEqual([(self.name, self.scenario)], get_scenario(self.name))

    def test_users(self):
        users = self.scenario.users()
        self.assertTrue(users)
        self.assertEqual(len(users), len(set(users)))
        self.assertIn(self.scenario.deployment_transaction().user, users)

    def test_steps(self):
        for step in self.scenario.steps():
            self.assertIsInstance(step, (Transaction, TransactionAssertion, OracleDelivery, TimeTravel))
            if isinstance(step, Transaction):
                self.assertIn(step.user, self.scenario.users())
                self.assertTrue(callable(getattr(AnonymousMedicalReview, step.name, None)), step.name)

    def test_ratings_use_configured_dimensions(self):
        for step in self.scenario.steps():
            dimension = getattr(step, 'dimension', None)
            if dimension is not None:
                self.assertIn(dimension, cfg.rating_dimensions)


class TestScenarioLookup(MedReviewTestCase):

    def test_lookup_by_module_name(self):
        self.assertEqual('RatingRoundTrip', get_scenario('round_trip')[0][0])

    def test_unknown_scenario(self):
        with self.assertRaises(KeyError):
            get_scenario('does_not_exist')

    def test_sorted_and_unique(self):
        names = [name for name, _ in all_scenarios]
        self.assertEqual(len(names), len(set(names)))
        self.assertIn('AbandonStuckAggregation', names)
