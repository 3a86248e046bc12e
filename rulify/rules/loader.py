"""
Rule-set document loader.

Reads JSON or YAML rule-set documents of the form::

    {"rules": [{"id": ..., "conditions": {...}, "actions": [...]}, ...]}

and compiles every definition into an executable rule. Condition items may
spell the operator as their own key (``{"var": "x", ">=": 1}``) or with
explicit ``op``/``value`` fields; both normalize to one
:class:`~rulify.rules.schemas.ConditionItem`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

import yaml
from pydantic import ValidationError

from rulify.core.config import get_settings
from rulify.core.errors import NullArgumentError, ParseError, RuleFileNotFoundError
from .interpreter import DeclarativeRule, compile_rule
from .schemas import (
    OPERATOR_ALIASES,
    ComparisonOp,
    ConditionGroup,
    ConditionItem,
    RuleDefinition,
    RuleSet,
)

if TYPE_CHECKING:
    from rulify.engine.engine import RuleEngine

logger = logging.getLogger(__name__)

DocumentFormat = Literal["json", "yaml"]

YAML_SUFFIXES = (".yaml", ".yml")
DOCUMENT_SUFFIXES = (".json",) + YAML_SUFFIXES

_OPERATOR_KEYS = {op.value for op in ComparisonOp} | set(OPERATOR_ALIASES)


class RuleLoader:
    """Loads rule-set documents from text, parsed mappings, files or directories."""

    def __init__(self, rules_dir: str | Path | None = None):
        self.rules_dir = Path(rules_dir) if rules_dir else None

    def load(
        self, document: str | bytes | Mapping | Path, format: DocumentFormat = "json"
    ) -> list[DeclarativeRule]:
        """Load executable rules from a document.

        Args:
            document: JSON/YAML text, an already-parsed mapping, or a Path
            format: Syntax of text documents

        Returns:
            Rules in document order (empty if the document has no ``rules`` key)

        Raises:
            NullArgumentError: If the document is None or blank
            ParseError: If the document is malformed
        """
        if isinstance(document, Path):
            return self.load_file(document)

        definitions = self.parse_definitions(document, format)
        return [compile_rule(definition) for definition in definitions]

    def load_file(self, path: str | Path | None = None) -> list[DeclarativeRule]:
        """Load rules from a JSON or YAML file (chosen by suffix)."""
        if path is None or (isinstance(path, str) and not path.strip()):
            path = get_settings().rules_file
        if not path:
            raise NullArgumentError("path")

        path = Path(path)
        if not path.is_file():
            raise RuleFileNotFoundError(f"Rule file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except UnicodeDecodeError as e:
            raise ParseError(f"Rule file is not valid UTF-8: {path}") from e

        format: DocumentFormat = "yaml" if path.suffix.lower() in YAML_SUFFIXES else "json"
        rules = self.load(content, format)
        logger.debug("Loaded %d rules from %s", len(rules), path)
        return rules

    def load_directory(self, path: str | Path | None = None) -> list[DeclarativeRule]:
        """Load all rule documents from a directory."""
        path = Path(path) if path else self.rules_dir
        if path is None and get_settings().rules_dir:
            path = Path(get_settings().rules_dir)
        if not path:
            raise NullArgumentError("path")
        if not path.is_dir():
            raise RuleFileNotFoundError(f"Rules directory not found: {path}")

        rules = []
        for document_file in sorted(path.iterdir()):
            if document_file.suffix.lower() not in DOCUMENT_SUFFIXES:
                continue
            try:
                rules.extend(self.load_file(document_file))
            except (ParseError, OSError) as e:
                logger.warning("Failed to load %s: %s", document_file, e)

        return rules

    def parse_definitions(
        self, document: str | bytes | Mapping, format: DocumentFormat = "json"
    ) -> list[RuleDefinition]:
        """Parse a document into rule definitions without compiling them."""
        content = self._read_document(document, format)
        if not isinstance(content, Mapping):
            raise ParseError("Rule document root must be an object")

        if "rules" not in content or content["rules"] is None:
            return []
        if not isinstance(content["rules"], list):
            raise ParseError("'rules' must be a list")

        try:
            rule_set = RuleSet(rules=[self._parse_rule(item) for item in content["rules"]])
        except ValidationError as e:
            raise ParseError(f"Invalid rule document: {e}") from e

        logger.debug("Parsed %d rule definitions", len(rule_set.rules))
        return rule_set.rules

    # -------------------------------------------------------------------------
    # Document reading
    # -------------------------------------------------------------------------

    def _read_document(self, document: str | bytes | Mapping, format: DocumentFormat) -> Any:
        if document is None:
            raise NullArgumentError("document")
        if isinstance(document, Mapping):
            return document

        if isinstance(document, bytes):
            try:
                document = document.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Rule document is not valid UTF-8: {e}") from e
        if not isinstance(document, str):
            raise ParseError(f"Unsupported document type: {type(document).__name__}")
        if not document.strip():
            raise NullArgumentError("document")

        if format == "yaml":
            try:
                return yaml.safe_load(document)
            except yaml.YAMLError as e:
                raise ParseError(f"Invalid YAML document: {e}") from e

        try:
            return json.loads(document, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON document: {e}") from e

    # -------------------------------------------------------------------------
    # Structure parsing
    # -------------------------------------------------------------------------

    def _parse_rule(self, data: Any) -> RuleDefinition:
        """Parse a rule from dictionary data."""
        if not isinstance(data, Mapping):
            raise ParseError("Each rule must be an object")
        data = dict(data)

        if data.get("conditions"):
            data["conditions"] = self._parse_condition_group(data["conditions"])
        else:
            data["conditions"] = None

        if data.get("actions"):
            if not isinstance(data["actions"], list):
                raise ParseError("'actions' must be a list")
            data["actions"] = [self._parse_action(a) for a in data["actions"]]

        return RuleDefinition(**data)

    def _parse_condition_group(self, data: Any) -> ConditionGroup:
        """Parse a condition group."""
        if not isinstance(data, Mapping):
            raise ParseError("'conditions' must be an object")

        result = {}
        for key in ("all", "any"):
            if data.get(key) is None:
                continue
            if not isinstance(data[key], list):
                raise ParseError(f"'conditions.{key}' must be a list")
            result[key] = [self._parse_condition_item(c) for c in data[key]]
        return ConditionGroup(**result)

    def _parse_condition_item(self, data: Any) -> ConditionItem:
        """Parse a condition item, accepting operator-as-key or explicit op/value."""
        if not isinstance(data, Mapping):
            raise ParseError("Condition items must be objects")

        var = data.get("var")
        if not var:
            raise ParseError(f"Condition item has no 'var': {dict(data)}")

        op = data.get("op")
        value = data.get("value")
        has_value = "value" in data
        for key, key_value in data.items():
            if key in ("var", "op", "value") or key not in _OPERATOR_KEYS:
                continue
            if op is None:
                op = key
            if not has_value:
                value = key_value
                has_value = True

        if op is None:
            raise ParseError(f"Condition on '{var}' has no comparison operator")

        op = OPERATOR_ALIASES.get(op, op)
        try:
            return ConditionItem(var=var, op=op, value=value)
        except ValidationError as e:
            raise ParseError(f"Invalid condition on '{var}': {e}") from e

    def _parse_action(self, data: Any) -> dict:
        """Validate the shape of an action; the model picks the variant by ``type``."""
        if not isinstance(data, Mapping):
            raise ParseError("Actions must be objects")
        if data.get("type") not in ("compute", "if"):
            raise ParseError(f"Unknown action type: {data.get('type')!r}")
        return dict(data)


def load_rules(
    document: str | bytes | Mapping | Path, format: DocumentFormat = "json"
) -> list[DeclarativeRule]:
    """Load executable rules from a document (text, mapping or Path)."""
    return RuleLoader().load(document, format)


def load_rules_from_file(path: str | Path | None = None) -> list[DeclarativeRule]:
    """Load executable rules from a file, defaulting to ``RULIFY_RULES_FILE``."""
    return RuleLoader().load_file(path)


def load_engine(
    document: str | bytes | Mapping | Path, format: DocumentFormat = "json"
) -> RuleEngine:
    """Create an engine pre-populated with the document's rules, in document order."""
    return _engine_with(load_rules(document, format))


def load_engine_from_file(path: str | Path | None = None) -> RuleEngine:
    """Create an engine pre-populated with the rules of a file."""
    return _engine_with(load_rules_from_file(path))


def _engine_with(rules: list[DeclarativeRule]) -> RuleEngine:
    from rulify.engine.engine import RuleEngine

    engine = RuleEngine()
    for rule in rules:
        engine.add_rule(rule)
    return engine
