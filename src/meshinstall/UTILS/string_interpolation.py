"""
Utilities for substituting environment variables into configuration text.
"""
import re
from typing import Dict

# ${VAR}, ${VAR:-default} or ${VAR:?message}; $$ is a literal dollar sign.
_PLACEHOLDER = re.compile(r'\$\$|\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([-?])([^}]*))?\}')


class EnvironmentInterpolator:
    """
    Substitutes ${VAR} style placeholders using a variable mapping.
    """
    @staticmethod
    def interpolate(template: str, context: Dict[str, str]) -> str:
        """
        Replaces every placeholder in the template.

        :param template: Text containing placeholders.
        :param context: Variables available for substitution.
        :return: The substituted text.
        :raises KeyError: If a variable without default is unset, or a ${VAR:?message} variable is empty.
        """
        def replace(match):
            if match.group(0) == '$$':
                return '$'

            name, modifier, alt = match.group(1), match.group(2), match.group(3)
            value = context.get(name)

            if modifier == '-':
                return value if value else alt
            if modifier == '?':
                if not value:
                    raise KeyError(f"{name}: {alt or 'must be set'}")
                return value
            if value is None:
                raise KeyError(f"Variable {name} not found in context")
            return value

        return _PLACEHOLDER.sub(replace, template)
