import os
import unittest

from parameterized import parameterized_class

from medreview.examples.example_scenarios import all_scenarios, get_scenario
from medreview.examples.simulation import ScenarioSimulator
from medreview.tests.utils.test_examples import TestScenario


class TestSimulationBase(TestScenario):
    def run_scenario(self):
        contract = ScenarioSimulator(self.scenario, self).run()
        self.assertIsNotNone(contract)
        self.assertEqual([], contract.gateway.pending_requests())
        return contract


@parameterized_class(('name', 'scenario'), all_scenarios)
class TestSimulationDummyHom(TestSimulationBase):
    def test_simulation_dummy_hom(self):
        self.run_scenario()


@parameterized_class(('name', 'scenario'), get_scenario('round_trip'))
class TestSimulationPaillier(TestSimulationBase):
    crypto_backend = 'paillier'

    @unittest.skipIf('MEDREVIEW_SKIP_REAL_ENC_TESTS' in os.environ and os.environ['MEDREVIEW_SKIP_REAL_ENC_TESTS'] == '1', 'real encryption tests disabled')
    def test_simulation_paillier(self):
        self.run_scenario()


@parameterized_class(('name', 'scenario'), get_scenario('round_trip'))
class TestSimulationWeb3Tester(TestSimulationBase):
    blockchain_backend = 'w3-eth-tester'

    @unittest.skipIf('MEDREVIEW_SKIP_CHAIN_TESTS' in os.environ and os.environ['MEDREVIEW_SKIP_CHAIN_TESTS'] == '1', 'chain tests disabled')
    def test_simulation_web3_tester(self):
        self.run_scenario()
