#!/usr/bin/env python3
"""
glTF Rig Diagnostic Tool

Imports the skeleton and animations of a glTF/GLB model and reports:
- Joint hierarchy (with renamed joints)
- Per-animation duration and key counts
- Animations that fail to import

Usage:
    python debug_gltf_rig.py path/to/model.gltf [sampling_rate]
"""

import logging
import sys

from gltfrig import GltfImporter, GltfImportError, ValidationError


def analyze_rig(filepath: str, sampling_rate: float = 0.0) -> bool:
    """Import a model's rig and print a summary."""
    print(f"🔍 Analyzing glTF rig: {filepath}")
    print("=" * 60)

    try:
        importer = GltfImporter.load(filepath)
        skeleton = importer.import_skeleton()
    except (FileNotFoundError, GltfImportError, ValidationError) as e:
        print(f"❌ ERROR: {e}")
        return False

    print(f"\n🦴 Skeleton: {skeleton.num_joints} joints, {len(skeleton.roots)} roots")
    for line in skeleton.describe().splitlines():
        print(f"   {line}")

    ok = True
    print("\n🎬 Animations:")
    for name in importer.animation_names():
        try:
            animation = importer.import_animation(name, sampling_rate)
        except (GltfImportError, ValidationError) as e:
            print(f"   ❌ {name}: {e}")
            ok = False
            continue

        translations = sum(len(track.translations) for track in animation.tracks)
        rotations = sum(len(track.rotations) for track in animation.tracks)
        scales = sum(len(track.scales) for track in animation.tracks)
        print(f"   ✅ {name}: {animation.duration:.3f}s, "
              f"keys T/R/S = {translations}/{rotations}/{scales}")

    return ok


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    logging.basicConfig(level=logging.WARNING, format="  %(levelname)s: %(message)s")
    sampling_rate = float(sys.argv[2]) if len(sys.argv) > 2 else 0.0
    sys.exit(0 if analyze_rig(sys.argv[1], sampling_rate) else 1)


if __name__ == "__main__":
    main()
