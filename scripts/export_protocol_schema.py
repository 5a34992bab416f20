"""Export the JSON Schemas of the power HAL endpoint wire models."""

from __future__ import annotations

import json
from pathlib import Path

from power_hal.host.protocol import PowerRequest, PowerResponse


def main() -> None:
    """Write request and response schemas to the repository root."""

    root = Path(__file__).resolve().parent.parent
    for name, model in (("request", PowerRequest), ("response", PowerResponse)):
        output_path = root / f"power_hal_{name}_schema.json"
        output_path.write_text(
            json.dumps(model.model_json_schema(), indent=2), encoding="utf-8"
        )


if __name__ == "__main__":
    main()
