from pathlib import Path

import pytest
import yaml
from jsonschema import ValidationError
from jsonschema.validators import Draft202012Validator as Validator

from pipeline.io.validate import SCHEMAS_ROOT, load_schema, schema_path, validate_obj


def test_all_schemas_are_valid_jsonschema() -> None:
    schema_files = sorted(SCHEMAS_ROOT.glob("*.yaml"))
    assert schema_files, "No schema files found under pipeline/schemas"
    for path in schema_files:
        with path.open("r", encoding="utf-8") as f:
            schema = yaml.safe_load(f)
        # Will raise on invalid schema; otherwise passes
        Validator.check_schema(schema)


def test_plan_schema_accepts_plan() -> None:
    schema = load_schema(schema_path("plan"))
    validate_obj(
        schema,
        {
            "order_id": "A1",
            "items_ordered": 501,
            "total_items": 750,
            "total_packs": 2,
            "packs": [{"size": 500, "count": 1}, {"size": 250, "count": 1}],
        },
    )


@pytest.mark.parametrize(
    "patch",
    [
        {"items_ordered": 0},
        {"packs": [{"size": 250, "count": 0}]},
        {"extra": True},
    ],
)
def test_plan_schema_rejects_bad_plans(patch) -> None:
    schema = load_schema(Path(schema_path("plan")))
    plan = {
        "items_ordered": 1,
        "total_items": 250,
        "total_packs": 1,
        "packs": [{"size": 250, "count": 1}],
    }
    plan.update(patch)
    with pytest.raises(ValidationError):
        validate_obj(schema, plan)
