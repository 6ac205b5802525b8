"""Example: evaluate a submission against a built-in form without Flask or MySQL.

Controllers stay thin; everything below is the same code the API calls.
"""

import json

from src.timeport_forms.timeport_forms.container import build_evaluator
from src.timeport_forms.timeport_forms.forms.defaults import default_fields


def main():
    fields = default_fields("leave")
    evaluator = build_evaluator()

    result = evaluator.evaluate(
        fields,
        {"leave_type": "Annual paid leave", "start_date": "2024-01-01", "end_date": "2024-01-05"},
    )
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    print(json.dumps(result.payload(fields), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
