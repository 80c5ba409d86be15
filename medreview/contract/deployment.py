import datetime
import json
import os
from typing import Any, Dict, Optional

from medreview import my_logging
from medreview.config import cfg, mr_print
from medreview.config_version import Versions
from medreview.contract.medical_review import AnonymousMedicalReview
from medreview.transaction.runtime import Runtime
from medreview.transaction.types import AddressValue
from medreview.utils.helpers import save_to_file
from medreview.utils.progress_printer import print_step
from medreview.utils.timer import Timer


class DeploymentInfo:
    """Static class, which holds the string keys of the deployment record."""
    filename = 'deployment-info.json'

    medreview_version = 'medreview-version'
    network = 'network'
    contract_address = 'contract-address'
    operator_address = 'operator-address'
    gateway_address = 'gateway-address'
    crypto_backend = 'crypto-backend'
    block_number = 'block-number'
    block_timestamp = 'block-timestamp'
    timestamp = 'timestamp'
    options = 'options'
    entry_points = 'entry-points'


entry_points = [
    'register_doctor(name, specialty, clinic)',
    'update_operator(new_operator)',
    'submit_review(doctor_id, rating, professionalism, communication, wait_time, comment)',
    'request_aggregation(doctor_id)',
    'on_ratings_decrypted(request_id, cleartexts, proof)',
    'abandon_aggregation()',
    'can_request_aggregation(doctor_id)',
    'get_doctor_info(doctor_id)',
    'get_doctor_rating(doctor_id)',
    'get_doctor_review_count(doctor_id)',
    'get_review_status(reviewer, doctor_id)',
    'get_all_doctors_count()',
    'get_total_reviews_count()',
]


@Timer('deploy_contract')
def deploy_contract(operator: Optional[AddressValue] = None) -> AnonymousMedicalReview:
    """
    Deploy a review contract on the configured runtime backends.

    :param operator: operator of the new contract, defaults to the ledger's default account
    """
    ledger = Runtime.blockchain()
    operator = ledger.default_address if operator is None else operator
    with print_step(f'Deploying review contract (operator {operator})'):
        contract = AnonymousMedicalReview(operator, gateway=Runtime.gateway(), ledger=ledger)
    mr_print(f'Contract deployed at {contract.address}')
    return contract


def deployment_info(contract: AnonymousMedicalReview) -> Dict[str, Any]:
    _, block = contract.ledger.get_special_variables(contract.operator)
    return {
        DeploymentInfo.medreview_version: cfg.medreview_version,
        DeploymentInfo.network: cfg.blockchain_backend,
        DeploymentInfo.contract_address: str(contract.address),
        DeploymentInfo.operator_address: str(contract.operator),
        DeploymentInfo.gateway_address: str(contract.gateway.address),
        DeploymentInfo.crypto_backend: cfg.crypto_backend,
        DeploymentInfo.block_number: block.number,
        DeploymentInfo.block_timestamp: contract.deployed_at,
        DeploymentInfo.timestamp: datetime.datetime.now(datetime.timezone.utc).isoformat(),
        DeploymentInfo.options: cfg.export_settings(),
        DeploymentInfo.entry_points: entry_points,
    }


def write_deployment_info(contract: AnonymousMedicalReview, output_dir: str) -> str:
    """Write the deployment record of contract to output_dir and return the path of the written file."""
    os.makedirs(output_dir, exist_ok=True)
    target = save_to_file(output_dir, DeploymentInfo.filename, json.dumps(deployment_info(contract), indent=2))
    my_logging.info(f'Deployment info saved to {target}')
    mr_print(f'Deployment info saved to {target}')
    return target


def load_deployment_info(path: str) -> Dict[str, Any]:
    """
    Load a deployment record.

    :param path: either the record itself or the directory which contains it
    :raise FileNotFoundError: if there is no record at path
    :raise ValueError: if the record is malformed or was written by an incompatible medreview version
    """
    if os.path.isdir(path):
        path = os.path.join(path, DeploymentInfo.filename)
    with open(path) as f:
        try:
            info = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f'Deployment info {path} is not valid json: {e}')

    version = info.get(DeploymentInfo.medreview_version) if isinstance(info, dict) else None
    if version is None:
        raise ValueError(f'Deployment info {path} does not specify a medreview version')
    if not Versions.is_compatible_deployment(version):
        raise ValueError(f'Deployment info {path} was written by medreview {version}, '
                         f'which is incompatible with medreview {cfg.medreview_version}')
    return info
