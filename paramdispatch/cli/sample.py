"""
Sample component tree for the paramdispatch CLI.

    Sampler            maxSteps (int), verbose (bool), seed (int)
    ├── Proposal       stepSize (float), verbose (bool)
    └── Output         outputFile (str), format (str)

"verbose" is bound twice on purpose: one submission sets both.

The tree can be built with the Output component missing so that it is
attached after parameters were submitted, which exercises replay.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..coercion import Binding
from ..configurable import Configurable
from ..sources import parse_properties


# =============================================================================
# COMPONENTS
# =============================================================================

class Sampler(Configurable):
    """Root component. Setters are bound by method name and by annotation."""

    def __init__(self):
        super().__init__("sampler")
        self.max_steps = 1000
        self.verbose = False
        self.seed = 0

        dispatcher = self.parameter_dispatcher
        dispatcher.register("maxSteps", "set_max_steps")
        dispatcher.register("verbose", self.set_verbose)
        dispatcher.register_attribute("seed")

    def set_max_steps(self, steps: int) -> None:
        self.max_steps = steps

    def set_verbose(self, verbose: bool) -> None:
        self.verbose = verbose

    def describe(self) -> dict[str, Any]:
        return {"maxSteps": self.max_steps, "verbose": self.verbose, "seed": self.seed}


class Proposal(Configurable):
    """Proposal distribution settings, bound with explicit Binding objects."""

    def __init__(self):
        super().__init__("proposal")
        self.step_size = 1.0
        self.verbose = False

        dispatcher = self.parameter_dispatcher
        dispatcher.register("stepSize", Binding.of_float(self._set_step_size))
        dispatcher.register("verbose", Binding.of_bool(self._set_verbose))

    def _set_step_size(self, value: float) -> None:
        self.step_size = value

    def _set_verbose(self, value: bool) -> None:
        self.verbose = value

    def describe(self) -> dict[str, Any]:
        return {"stepSize": self.step_size, "verbose": self.verbose}


class Output(Configurable):
    """Where and how results are written."""

    def __init__(self):
        super().__init__("output")
        self.output_file = "results.txt"
        self.format = "text"

        dispatcher = self.parameter_dispatcher
        dispatcher.register_attribute("outputFile", "output_file")
        dispatcher.register_attribute("format", kind="str")

    def describe(self) -> dict[str, Any]:
        return {"outputFile": self.output_file, "format": self.format}


# =============================================================================
# SAMPLE DATA (For Demo Purposes)
# =============================================================================

SAMPLE_PROPERTIES = """\
# Sample configuration for the demo tree
maxSteps = 5000
verbose = true
seed = 42
stepSize: 0.25
outputFile results.csv
format = csv
"""


def sample_values() -> dict[str, str]:
    return parse_properties(SAMPLE_PROPERTIES, source="<sample>")


# =============================================================================
# TREE
# =============================================================================

@dataclass
class SampleTree:
    """The sample components. output is detached until attach_output()."""
    sampler: Sampler
    proposal: Proposal
    output: Output
    output_attached: bool = False

    def attach_output(self) -> None:
        if not self.output_attached:
            self.sampler.add_component(self.output)
            self.output_attached = True

    def components(self) -> list[Configurable]:
        return [self.sampler, self.proposal, self.output]


def build_sample_tree(attach_output: bool = True) -> SampleTree:
    """Build the sample tree, optionally leaving Output detached."""
    tree = SampleTree(sampler=Sampler(), proposal=Proposal(), output=Output())
    tree.sampler.add_component(tree.proposal)
    if attach_output:
        tree.attach_output()
    return tree
