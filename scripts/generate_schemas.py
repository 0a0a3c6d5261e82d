"""Generate JSON schemas for the public result models and save to schemas/ directory."""

import json
from pathlib import Path

from lottieload.contracts import Issue
from lottieload.kernel.assets import EmbeddedImageAsset, ExternalImageAsset, PrecompAsset


def generate_schemas():
    """Generate JSON schemas for the issue and asset models."""
    schemas_dir = Path(__file__).parent.parent / "schemas"
    schemas_dir.mkdir(exist_ok=True)

    models = {
        "issue.schema.json": Issue,
        "external_image_asset.schema.json": ExternalImageAsset,
        "embedded_image_asset.schema.json": EmbeddedImageAsset,
        "precomp_asset.schema.json": PrecompAsset,
    }
    for filename, model in models.items():
        schema = model.model_json_schema()
        schema_path = schemas_dir / filename
        with open(schema_path, 'w', encoding='utf-8') as f:
            json.dump(schema, f, indent=2, ensure_ascii=False)
        print(f"Generated: {schema_path}")

    print("\nSchema generation complete!")


if __name__ == "__main__":
    generate_schemas()
