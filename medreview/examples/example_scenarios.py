import importlib
import pkgutil
from typing import List, Tuple

from medreview.examples import scenarios
from medreview.examples.scenario import Scenario


def load_scenario(module_name: str) -> Tuple[str, Scenario]:
    p = importlib.import_module(f'{scenarios.__name__}.{module_name}')
    s = p.SCENARIO
    return s.name(), s


def collect_scenarios() -> List[Tuple[str, Scenario]]:
    return [load_scenario(m.name) for m in sorted(pkgutil.iter_modules(scenarios.__path__), key=lambda m: m.name)]


def get_scenario(name: str) -> List[Tuple[str, Scenario]]:
    """Look up a scenario by its name or by the name of the module defining it."""
    for module_name, (scenario_name, s) in zip(sorted(m.name for m in pkgutil.iter_modules(scenarios.__path__)),
                                               all_scenarios):
        if name in (module_name, scenario_name):
            return [(scenario_name, s)]
    raise KeyError(f'Unknown scenario {name}')


all_scenarios = collect_scenarios()
