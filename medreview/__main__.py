#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK
import argcomplete
import argparse
import os

from argcomplete.completers import FilesCompleter, DirectoriesCompleter

from medreview.config_user import UserConfig
from medreview.utils.progress_printer import fail_print, success_print, warn_print


def parse_config_doc():
    import textwrap
    from typing import get_type_hints
    __ucfg = UserConfig()

    docs = {}
    for name, prop in vars(UserConfig).items():
        if name.startswith('_') or not isinstance(prop, property):
            continue
        t = get_type_hints(prop.fget)['return']
        doc = prop.__doc__
        choices = None
        if hasattr(__ucfg, f'_{name}_values'):
            choices = getattr(__ucfg, f'_{name}_values')
        default_val = getattr(__ucfg, name)
        docs[name] = (
            f"type: {t}\n\n"
            f"{textwrap.dedent(doc).strip()}\n\n"
            f"Default value: {default_val}", t, default_val, choices)
    return docs


def parse_arguments():
    class ShowSuppressedInHelpFormatter(argparse.RawTextHelpFormatter):
        def add_usage(self, usage, actions, groups, prefix=None):
            if usage is not argparse.SUPPRESS:
                actions = [action for action in actions if action.metavar != '<cfg_val>']
                args = usage, actions, groups, prefix
                self._add_item(self._format_usage, args)

    main_parser = argparse.ArgumentParser(prog='medreview')
    config_files = ('json', )

    msg = 'Path to local configuration file (defaults to "config.json" in cwd). ' \
          'This file (if it exists), overrides settings defined in the global configuration.'
    main_parser.add_argument('--config-file', default='config.json', metavar='<config_file>', help=msg).completer = FilesCompleter(config_files)

    # Shared 'config' parser
    config_parser = argparse.ArgumentParser(add_help=False)
    msg = 'These parameters can be used to override settings defined (and documented) in config_user.py'
    cfg_group = config_parser.add_argument_group(title='Configuration Options', description=msg)

    # Expose config_user.py options via command line arguments, they are supported in all parsers
    cfg_docs = parse_config_doc()

    def add_config_args(parser, arg_names):
        for name in arg_names:
            doc, t, defval, choices = cfg_docs[name]

            if t is bool:
                if defval:
                    parser.add_argument(f'--no-{name.replace("_", "-")}', dest=name, help=doc, action='store_false')
                else:
                    parser.add_argument(f'--{name.replace("_", "-")}', dest=name, help=doc, action='store_true')
            elif t is int:
                parser.add_argument(f'--{name.replace("_", "-")}', type=int, dest=name, metavar='<cfg_val>', help=doc)
            else:
                arg = parser.add_argument(f'--{name.replace("_", "-")}', dest=name, metavar='<cfg_val>', help=doc,
                                          choices=choices)
                if name.endswith('dir'):
                    arg.completer = DirectoriesCompleter()
    add_config_args(cfg_group, cfg_docs.keys())

    subparsers = main_parser.add_subparsers(title='actions', dest='cmd', required=True)

    # 'deploy' parser
    deploy_parser = subparsers.add_parser('deploy', parents=[config_parser], help='Deploy a review contract and write its deployment info.', formatter_class=ShowSuppressedInHelpFormatter)
    msg = 'The directory to write deployment-info.json to. Default: Current directory'
    deploy_parser.add_argument('-o', '--output', default=os.getcwd(), help=msg, metavar='<output_directory>').completer = DirectoriesCompleter()
    deploy_parser.add_argument('--operator', help='Operator address (defaults to the default account of the ledger)', metavar='<address>')
    deploy_parser.add_argument('--log', action='store_true', help='enable logging')
    deploy_parser.add_argument('--shell', action='store_true', help='enter a transaction shell after deployment')

    # 'info' parser
    info_parser = subparsers.add_parser('info', help='Show a deployment record.', formatter_class=ShowSuppressedInHelpFormatter)
    msg = 'deployment-info.json or the directory containing it.'
    info_parser.add_argument('input', help=msg, metavar='<deployment_info>').completer = FilesCompleter(config_files)

    # 'simulate' parser
    simulate_parser = subparsers.add_parser('simulate', parents=[config_parser], help='Execute transaction scenarios on a fresh contract.', formatter_class=ShowSuppressedInHelpFormatter)
    simulate_parser.add_argument('scenarios', nargs='*', help='Scenario names (default: all)', metavar='<scenario>')
    simulate_parser.add_argument('--log', action='store_true', help='enable logging')

    # 'list-scenarios' parser
    subparsers.add_parser('list-scenarios', help='List the built-in transaction scenarios.')

    # parse
    argcomplete.autocomplete(main_parser, always_complete_options=False)
    a = main_parser.parse_args()
    return a


def main():
    # parse arguments
    a = parse_arguments()

    from medreview import my_logging
    from medreview.config import cfg
    from medreview.errors.exceptions import MedReviewError

    # Load configuration files
    try:
        cfg.load_configuration_from_disk(a.config_file)
    except Exception as e:
        with fail_print():
            print(f"ERROR: Failed to load configuration files\n{e}")
        exit(42)

    # Support for overriding any user config setting via command line
    # The evaluation order for configuration loading is:
    # Default values in config.py -> Site config.json -> user config.json -> local config.json -> cmdline arguments
    # Settings defined at a later stage override setting values defined at an earlier stage
    override_dict = {}
    for name in vars(UserConfig):
        if name[0] != '_' and hasattr(a, name):
            val = getattr(a, name)
            if val is not None:
                override_dict[name] = val
    try:
        cfg.override_defaults(override_dict)
    except ValueError as e:
        with fail_print():
            print(f'Error: {e}')
        exit(10)

    if getattr(a, 'log', False):
        log_file = my_logging.get_log_file(filename=a.cmd, include_timestamp=True, label=None)
        my_logging.prepare_logger(log_file)

    if a.cmd == 'list-scenarios':
        from medreview.examples.example_scenarios import all_scenarios
        for name, _ in all_scenarios:
            print(name)
        exit(0)
    elif a.cmd == 'info':
        import json
        from medreview.contract.deployment import load_deployment_info
        try:
            info = load_deployment_info(a.input)
        except (OSError, ValueError) as e:
            with fail_print():
                print(f'ERROR: cannot read deployment info\n{e}')
            exit(2)
        print(json.dumps(info, indent=2))
        exit(0)
    elif a.cmd == 'deploy':
        from medreview.contract.deployment import deploy_contract, write_deployment_info
        from medreview.transaction.types import AddressValue

        try:
            operator = None if a.operator is None else AddressValue(a.operator)
        except ValueError as e:
            with fail_print():
                print(f'ERROR: invalid operator address\n{e}')
            exit(11)
        try:
            contract = deploy_contract(operator)
            write_deployment_info(contract, os.path.abspath(a.output))
        except (MedReviewError, OSError) as e:
            with fail_print():
                print(f'ERROR: failed to deploy contract\n{e}')
            exit(12)

        if contract.ledger.is_debug_backend() and not a.shell:
            with warn_print():
                print(f'WARNING: the {cfg.blockchain_backend} ledger only lives in this process, '
                      f'the deployed contract is gone once medreview exits (use --shell to interact with it)')

        if a.shell:
            import code
            scope = {name: getattr(contract, name) for name in dir(contract) if not name.startswith('_')}
            scope['contract'] = contract
            scope['me'] = contract.operator
            code.interact(local=scope)
            exit(0)
    elif a.cmd == 'simulate':
        from medreview.examples.example_scenarios import all_scenarios, get_scenario
        from medreview.examples.simulation import ScenarioSimulator

        try:
            scenarios = all_scenarios if not a.scenarios else [s for name in a.scenarios for s in get_scenario(name)]
        except KeyError as e:
            with fail_print():
                print(f'Error: {e}')
            exit(1)

        failed = 0
        for name, scenario in scenarios:
            try:
                ScenarioSimulator(scenario).run()
                print(f'{name}: ok')
            except (AssertionError, MedReviewError) as e:
                failed += 1
                with fail_print():
                    print(f'{name}: FAILED\n{e}')
        if failed:
            exit(3)
    else:
        raise NotImplementedError(a.cmd)

    with success_print():
        print("Finished successfully")


if __name__ == '__main__':
    main()
