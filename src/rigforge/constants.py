"""Shared constants for RigForge."""

import sys

import numpy as np

from rigforge.core.math_utils import vec3

# Scale factors this close to 1.0 count as "no scale requested"
SCALE_EPSILON = sys.float_info.epsilon

# Hierarchy restructuring
DEFAULT_ADD_ROOT_ROOT_NAME = "root"

# Source-rig quirk: the hips joint carries a small horizontal offset
HIPS_JOINT_NAME = "Hips"

# Proxy placeholders created by the enhancement pass
PHYSICS_SUFFIX = "__phys"
RAGDOLL_SUFFIX = "__ragdoll"
PROXY_HALF_EXTENT = 1.0

# Procedural joint placement
WORLD_UP = vec3(0.0, 1.0, 0.0)
WORLD_DOWN = vec3(0.0, -1.0, 0.0)
UP_REFERENCE_LENGTH = 100.0

# Standard IK joint set: (name, parent, policy, base offset)
# policy: 0 = fixed offset, 1 = up reference, 2 = down reference
IK_JOINT_SET = [
    # Foot planting
    ("RightFootIKTarget", "RightFoot", 2, (0.0, 0.0, 0.0)),
    ("RightFootIKWeight", "RightFoot", 1, (0.0, 100.0, 0.0)),
    ("LeftFootIKTarget", "LeftFoot", 2, (0.0, 0.0, 0.0)),
    ("LeftFootIKWeight", "LeftFoot", 1, (0.0, 100.0, 0.0)),
    # Hands: weapon bones and positioning
    ("RightHandIK", "RightHand", 0, (0.0, 20.0, 0.0)),
    ("LeftHandIK", "LeftHand", 0, (0.0, 20.0, 0.0)),
    # Looking
    ("HeadIKLook", "Head", 0, (0.0, 0.0, 6.0)),
    # Approximate first-person camera socket
    ("Camera", "Head", 0, (0.0, 8.3, 7.4)),
]

# Mixamo export quirks
MIXAMO_RENAMES = {
    "default": "Eyes",
    "Tops": "Top",
    "Bottoms": "Bottom",
}
MIXAMO_MESH_NAMES = ["Body", "Bottom", "Eyes", "Eyelashes", "Hair", "Top", "Shoes"]
MIXAMO_MESH_GROUP = "Meshes"
MIXAMO_ROOT_PROXY = "RootProxy"
MIXAMO_ROOT = "Root"

# Axis systems: basis change from the Y-up right-handed frame
_Y_UP_RH = np.eye(3, dtype=np.float64)
_Z_UP_RH = np.array([
    [1.0, 0.0, 0.0],
    [0.0, 0.0, -1.0],
    [0.0, 1.0, 0.0],
], dtype=np.float64)
_Y_UP_LH = np.diag([1.0, 1.0, -1.0])

AXIS_SYSTEMS = {
    "maya-y": _Y_UP_RH,
    "mayazup": _Z_UP_RH,
    "maya-z": _Z_UP_RH,
    "max": _Z_UP_RH,
    "mb": _Y_UP_RH,
    "opengl": _Y_UP_RH,
    "directx": _Y_UP_LH,
    "lightwave": _Y_UP_LH,
}

# Scene documents
SCENE_SUFFIXES = (".rig.json",)
