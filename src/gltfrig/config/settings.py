"""
Import Configuration Settings

All configuration constants for the glTF skeleton/animation importer.
Modify these values to change importer defaults.
"""

# ============================================================================
# Scene Selection
# ============================================================================

# Scene used when the document does not declare a default scene
DEFAULT_SCENE_INDEX = 0

# ============================================================================
# Joint Naming
# ============================================================================

# Unnamed nodes become "<prefix><node index>"
UNNAMED_JOINT_PREFIX = "gltf_node_"

# Indentation (spaces per depth level) of the logged joint hierarchy
HIERARCHY_INDENT = 2

# ============================================================================
# Animation Sampling
# ============================================================================

# glTF carries no frame rate, so a sampling rate of 0 falls back to this (Hz)
DEFAULT_SAMPLING_RATE = 60.0

# STEP channels hold each value until just before the next key
STEP_EPSILON = 1e-6
