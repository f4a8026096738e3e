#!/usr/bin/env python3
"""Option validation script."""

import sys
from pathlib import Path
from typing import List

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from daterange_marks.config.loader import OptionsLoader
from daterange_marks.config.presets import PRESETS
from daterange_marks.config.validation import OptionsValidator, OptionIssue
from daterange_marks.errors import ValidationError


def validate_preset(preset: str) -> List[OptionIssue]:
    """Validate the merged options of a specific preset."""
    loader = OptionsLoader.create()
    options = loader.merge_options(preset=preset)
    return OptionsValidator.validate_options(options)


def main():
    """Main validation function."""
    print("🔍 Validating Daterange Marks options...")

    loader = OptionsLoader.create()
    all_valid = True

    for preset in sorted(PRESETS):
        print(f"\n📊 Validating preset {preset}...")

        issues = validate_preset(preset)
        if issues:
            print(f"❌ Found {len(issues)} validation errors:")
            for issue in issues:
                print(f"  • {issue.field}: {issue.message} (value: {issue.value})")
            all_valid = False
        else:
            print(f"✅ {preset} preset is valid")

    options_file = loader.config_dir / "plugin.yaml"
    print(f"\n📋 Validating options file {options_file}...")

    if not options_file.exists():
        print("⚠️  No options file found, skipping")
    else:
        try:
            loader.build(options_file=options_file.name)
            print("✅ Options file is valid")
        except ValidationError as e:
            print(f"❌ Options file validation failed: {e}")
            for issue in e.context.get("issues", []):
                print(f"  • {issue}")
            all_valid = False

    if all_valid:
        print(f"\n🎉 All option validation passed!")
        sys.exit(0)
    else:
        print(f"\n❌ Option validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
