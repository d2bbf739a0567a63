"""Per-file processing chain: load, transform the rig, save."""

import logging
from pathlib import Path
from typing import Optional

from rigforge.core.config_loader import ProcessingConfig
from rigforge.core.scene_graph import Scene
from rigforge.loaders.scene_document import SceneDocumentProvider
from rigforge.rig.axis_system import convert_axis_system
from rigforge.rig.bind_pose import apply_weapon_fix
from rigforge.rig.hierarchy import insert_new_ancestor, remove_leaf_bones
from rigforge.rig.ik_joints import add_ik_joints
from rigforge.rig.mixamo import apply_mixamo_fixes
from rigforge.rig.rename import apply_rename_pass
from rigforge.rig.rescale import uniform_rescale

logger = logging.getLogger(__name__)


def report_metadata(scene: Scene) -> None:
    meta = scene.metadata
    logger.info("Meta-Data")
    logger.info("    Title: %s", meta.title)
    logger.info("    Subject: %s", meta.subject)
    logger.info("    Author: %s", meta.author)
    logger.info("    Keywords: %s", meta.keywords)
    logger.info("    Revision: %s", meta.revision)
    logger.info("    Comment: %s", meta.comment)


def rename_first_animation(scene: Scene, new_name: str) -> bool:
    """Rename the first animation stack; other stack names are only reported."""
    for i, stack in enumerate(scene.animation_stacks):
        logger.info("Animation Stack Name: %s", stack.name)
        if i == 0:
            logger.info("Renamed from %s to %s", stack.name, new_name)
            if scene.current_animation_stack == stack.name:
                scene.current_animation_stack = new_name
            stack.name = new_name
    return bool(scene.animation_stacks)


class ProcessingPipeline:
    """Runs the rig transformation passes over scenes.

    Order per scene:
      axis conversion → metadata report → leaf pruning → new root
      → bind-pose reset → rename/enhance → Mixamo fixes → IK joints
      → uniform rescale → rename first animation
    """

    def __init__(self, config: ProcessingConfig, provider: Optional[SceneDocumentProvider] = None):
        self.config = config
        self.provider = provider or SceneDocumentProvider()

    def process_scene(self, scene: Scene, take_name: str = "") -> Scene:
        cfg = self.config

        if cfg.axis:
            convert_axis_system(scene, cfg.axis)

        report_metadata(scene)

        if cfg.remove_leaf_name:
            report = remove_leaf_bones(scene, scene.root, cfg.remove_leaf_name)
            logger.info("Leaf pruning: %d removed, %d not leaves",
                        len(report.removed), len(report.not_leaf))

        if cfg.add_root:
            # Search below the scene root only, like a child lookup.
            child = None
            for node in scene.root.children:
                child = node.find(cfg.add_root_child_name)
                if child is not None:
                    break
            if child is not None:
                insert_new_ancestor(scene, child, cfg.add_root_root_name)
            else:
                logger.warning("addRoot: child %r not found", cfg.add_root_child_name)

        if cfg.apply_weapon_fix:
            apply_weapon_fix(scene)

        apply_rename_pass(scene, cfg.joints, create_proxies=cfg.create_proxies)

        if cfg.apply_mixamo_fixes:
            apply_mixamo_fixes(scene)

        if cfg.add_ik:
            add_ik_joints(scene)

        uniform_rescale(scene, cfg.scale)

        if take_name:
            rename_first_animation(scene, take_name)
        return scene

    def process_file(self, in_path: Path, out_path: Path) -> bool:
        """Load, process and save one file. True only if both I/O steps succeed."""
        in_path = Path(in_path)
        out_path = Path(out_path)
        logger.info("File: %s", in_path)

        scene = self.provider.load(in_path)
        if scene is None:
            return False

        try:
            self.process_scene(scene, take_name=_take_name(in_path, self.provider.suffixes))
        except ValueError as e:
            # e.g. the document names an unknown axis system
            logger.error("Could not process %s: %s", in_path, e)
            return False

        if not self.provider.save(scene, out_path):
            return False
        logger.info("Saved %s", out_path)
        return True

    def process_directory(self, input_root: Path, output_root: Path) -> bool:
        """Process every scene under ``input_root``, mirroring paths under ``output_root``.

        One file failing does not stop the rest; returns True only if all
        files succeeded.
        """
        input_root = Path(input_root)
        output_root = Path(output_root)
        if not input_root.is_dir():
            logger.error("Folder not found: %s", input_root)
            return False

        all_ok = True
        count = 0
        # Materialized up front so files written below the input root
        # are not picked up again.
        for in_path in sorted(input_root.rglob("*")):
            if not in_path.is_file() or not self.provider.accepts(in_path):
                continue
            out_path = output_root / in_path.relative_to(input_root)
            out_path.parent.mkdir(parents=True, exist_ok=True)
            ok = self.process_file(in_path, out_path)
            all_ok = all_ok and ok
            count += 1

        logger.info("Processed %d files", count)
        return all_ok


def _take_name(path: Path, suffixes: tuple[str, ...]) -> str:
    name = path.name
    for suffix in suffixes:
        if name.lower().endswith(suffix):
            return name[: -len(suffix)]
    return path.stem
