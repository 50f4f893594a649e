"""
Exclusion rules (the `exclude` list of the project options file)

Entry shapes:
  "*.map"              → suffix rule   ".map"   (matches the file name end)
  "node_modules"       → exact-name rule "node_modules"
                         + substring rule "node_modules" (anywhere in rel path)
  {"suffix": ".log"}   → suffix rule only
  {"name": ".DS_Store"}→ exact-name rule only
  {"contains": "tmp/"} → substring rule only
"""
from typing import NamedTuple
from ..errors import ConfigError

SUFFIX = "suffix"
NAME = "name"
CONTAINS = "contains"

RULE_KINDS = (SUFFIX, NAME, CONTAINS)


class ExclusionRule(NamedTuple):
    kind: str
    value: str

    def matches(self, name: str, rel_path: str) -> bool:
        if self.kind == SUFFIX:
            return name.endswith(self.value)
        if self.kind == NAME:
            return name == self.value
        return self.value in rel_path


def parse_exclusions(entries) -> list[ExclusionRule]:
    """Turn the configured exclude list into ExclusionRule values."""
    rules: list[ExclusionRule] = []
    for raw in entries or []:
        if isinstance(raw, str):
            p = raw.strip()
            if not p:
                continue
            if p.startswith("*."):
                rules.append(ExclusionRule(SUFFIX, p[1:]))
            else:
                rules.append(ExclusionRule(NAME, p))
                rules.append(ExclusionRule(CONTAINS, p))
        elif isinstance(raw, dict) and len(raw) == 1:
            kind, value = next(iter(raw.items()))
            if kind not in RULE_KINDS or not isinstance(value, str) or not value:
                raise ConfigError(f"Invalid exclude entry: {raw!r}")
            rules.append(ExclusionRule(kind, value))
        else:
            raise ConfigError(
                f"Invalid exclude entry: {raw!r} "
                f"(use a string or one of {{{', '.join(RULE_KINDS)}: ...}})"
            )
    return rules


def is_excluded(name: str, rel_path: str, rules: list[ExclusionRule]) -> bool:
    """Check a file/dir name and its forward-slash rel path against the rules"""
    norm = rel_path.replace("\\", "/")
    return any(r.matches(name, norm) for r in rules)
