import json
import os

from medreview.config import cfg
from medreview.contract.deployment import DeploymentInfo, deploy_contract, write_deployment_info, \
    load_deployment_info
from medreview.tests.medreview_unit_test import MedReviewTestCase
from medreview.transaction.runtime import Runtime


class TestDeployment(MedReviewTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.output_dir = os.path.join(self.tmp_dir.name, 'deployment')

    def test_deploy_default_operator(self):
        contract = deploy_contract()
        self.assertEqual(Runtime.blockchain().default_address, contract.operator)
        self.assertIs(Runtime.gateway(), contract.gateway)
        self.assertEqual(0, contract.get_all_doctors_count())

    def test_deploy_operator(self):
        operator = Runtime.blockchain().create_test_accounts(1)[0]
        contract = deploy_contract(operator)
        self.assertEqual(operator, contract.operator)
        self.assertNotEqual(deploy_contract(operator).address, contract.address)

    def test_write_and_load(self):
        contract = deploy_contract()
        target = write_deployment_info(contract, self.output_dir)
        self.assertEqual(os.path.join(self.output_dir, DeploymentInfo.filename), target)

        for path in (target, self.output_dir):
            info = load_deployment_info(path)
            self.assertEqual(cfg.medreview_version, info[DeploymentInfo.medreview_version])
            self.assertEqual(str(contract.address), info[DeploymentInfo.contract_address])
            self.assertEqual(str(contract.operator), info[DeploymentInfo.operator_address])
            self.assertEqual(str(contract.gateway.address), info[DeploymentInfo.gateway_address])
            self.assertEqual(self.crypto_backend, info[DeploymentInfo.crypto_backend])
            self.assertEqual(contract.deployed_at, info[DeploymentInfo.block_timestamp])
            self.assertEqual(cfg.aggregation_min_reviews, info[DeploymentInfo.options]['aggregation_min_reviews'])
            self.assertIn('request_aggregation(doctor_id)', info[DeploymentInfo.entry_points])

    def _write(self, content: str) -> str:
        os.makedirs(self.output_dir, exist_ok=True)
        path = os.path.join(self.output_dir, DeploymentInfo.filename)
        with open(path, 'w') as f:
            f.write(content)
        return path

    def test_missing_record(self):
        with self.assertRaises(FileNotFoundError):
            load_deployment_info(os.path.join(self.tmp_dir.name, 'nowhere'))

    def test_invalid_json(self):
        with self.assertRaises(ValueError):
            load_deployment_info(self._write('{"medreview-version": '))

    def test_missing_version(self):
        with self.assertRaises(ValueError):
            load_deployment_info(self._write(json.dumps({DeploymentInfo.network: 'local'})))
        with self.assertRaises(ValueError):
            load_deployment_info(self._write(json.dumps([1, 2, 3])))

    def test_incompatible_version(self):
        major = int(cfg.medreview_version.split('.')[0])
        with self.assertRaises(ValueError):
            load_deployment_info(self._write(json.dumps({DeploymentInfo.medreview_version: f'{major + 1}.0.0'})))
