"""Rig processing subsystem -- skeleton restructuring and transform passes."""

from rigforge.rig.axis_system import convert_axis_system
from rigforge.rig.bind_pose import apply_weapon_fix, reset_bind_pose
from rigforge.rig.hierarchy import PruneReport, insert_new_ancestor, remove_leaf_bones, remove_node
from rigforge.rig.ik_joints import OffsetPolicy, add_ik_joints, synthesize_joint
from rigforge.rig.mixamo import apply_mixamo_fixes
from rigforge.rig.rename import apply_rename_pass, rename_and_enhance
from rigforge.rig.rescale import uniform_rescale

__all__ = [
    "OffsetPolicy",
    "PruneReport",
    "add_ik_joints",
    "apply_mixamo_fixes",
    "apply_rename_pass",
    "apply_weapon_fix",
    "convert_axis_system",
    "insert_new_ancestor",
    "remove_leaf_bones",
    "remove_node",
    "rename_and_enhance",
    "reset_bind_pose",
    "synthesize_joint",
    "uniform_rescale",
]
