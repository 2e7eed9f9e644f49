"""Evaluation of expression functions embedded in configuration values."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Callable, Mapping

from shipyard.core.errors import ConfigLoadError

# ${fn("argument")}
EXPRESSION_PATTERN = re.compile(r"\$\{\s*([A-Za-z_][A-Za-z0-9_]*)\(\s*\"([^\"]*)\"\s*\)\s*\}")


def kube_config_path(home: Path, cluster: str) -> Path:
    """Location of the kubeconfig written for a cluster."""
    return home / ".shipyard" / "config" / cluster / "kubeconfig.yaml"


class EvalContext:
    """
    Functions available to expressions in one configuration load.

    Each loader gets its own context, so two configurations can be loaded
    side by side with different environments.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        home: str | Path | None = None,
    ) -> None:
        self.environ: Mapping[str, str] = dict(os.environ if environ is None else environ)
        self.home = Path(home) if home is not None else Path.home()
        self.functions: dict[str, Callable[[str], str]] = {
            "env": self.env,
            "k8s_config": self.k8s_config,
        }

    def env(self, name: str) -> str:
        """Value of an environment variable, empty when unset."""
        return self.environ.get(name, "")

    def k8s_config(self, cluster: str) -> str:
        return str(kube_config_path(self.home, cluster))

    def call(self, function: str, argument: str) -> str:
        try:
            fn = self.functions[function]
        except KeyError:
            raise ConfigLoadError(f"Unknown function in expression: {function}") from None
        return fn(argument)

    def evaluate(self, value: Any) -> Any:
        """
        Replace every ``${fn("arg")}`` expression in a value.

        Lists and mappings are walked recursively; non-string scalars are
        returned unchanged.
        """
        if isinstance(value, str):
            return EXPRESSION_PATTERN.sub(lambda m: self.call(m.group(1), m.group(2)), value)
        if isinstance(value, list):
            return [self.evaluate(v) for v in value]
        if isinstance(value, dict):
            return {k: self.evaluate(v) for k, v in value.items()}
        return value
