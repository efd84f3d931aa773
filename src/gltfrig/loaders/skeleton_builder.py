"""
Skeleton Builder

Builds a runtime skeleton from the skins of a glTF scene.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

import pygltflib
from pyrr import Vector3, Quaternion

from ..animation import Joint, Skeleton
from ..config.settings import DEFAULT_SCENE_INDEX
from ..errors import GltfImportError
from .naming import JointNameRegistry


logger = logging.getLogger(__name__)


@dataclass
class SkeletonImportResult:
    """Result returned from :class:`SkeletonBuilder`."""

    skeleton: Skeleton
    names: JointNameRegistry
    scene_index: int


class SkeletonBuilder:
    """
    Converts the node hierarchy under a scene's skins into a Skeleton.

    Every skin contributes the topmost of its joints as a skeleton root, and
    everything below a root (skin joint or not) becomes a joint.
    """

    def __init__(self, gltf: pygltflib.GLTF2):
        """
        Initialize builder.

        Args:
            gltf: Parsed glTF document
        """
        self.gltf = gltf

    def build(self, scene_index: Optional[int] = None) -> SkeletonImportResult:
        """
        Build the skeleton of a scene.

        Args:
            scene_index: Scene to import (defaults to the document's default scene)

        Returns:
            Skeleton plus the joint name registry filled while building it

        Raises:
            GltfImportError: The scene has nothing to import or a joint uses a matrix
            ValidationError: The built skeleton is malformed
        """
        gltf = self.gltf

        if not gltf.scenes:
            raise GltfImportError("No scenes found")
        if not gltf.skins:
            raise GltfImportError("No skins found")

        scene_index = self.select_scene(scene_index)
        scene = gltf.scenes[scene_index]
        logger.info("Importing from scene #%d (%s).", scene_index, scene.name or "")

        if not scene.nodes:
            raise GltfImportError(f"Scene #{scene_index} has no nodes")

        skins = self.skins_for_scene(scene)
        if not skins:
            raise GltfImportError(f"No skins exist in scene #{scene_index}")

        # Several skins may share one skeleton, so roots are deduplicated
        roots: Set[int] = set()
        for skin in skins:
            root = self.find_skin_root(skin)
            if root is not None:
                roots.add(root)

        skeleton = Skeleton(name=scene.name or f"Scene_{scene_index}")
        names = JointNameRegistry()

        roots = self._outermost(roots)

        # Named in node index order so the lowest index keeps a duplicated name
        for node_idx in sorted(self.subtree_nodes(roots)):
            names.assign(node_idx, self.gltf.nodes[node_idx].name)

        for root in roots:
            self._build_tree(root, skeleton, names)

        logger.info("Joint hierarchy:\n%s", skeleton.describe())
        skeleton.validate()

        return SkeletonImportResult(skeleton=skeleton, names=names, scene_index=scene_index)

    def select_scene(self, scene_index: Optional[int] = None) -> int:
        """
        Pick the scene to import.

        An explicit index wins, then the document's default scene, then the first one.
        """
        count = len(self.gltf.scenes)
        if scene_index is not None:
            if not 0 <= scene_index < count:
                raise GltfImportError(f"Scene #{scene_index} does not exist ({count} scenes)")
            return scene_index

        default = self.gltf.scene
        if default is not None and 0 <= default < count:
            return default
        return DEFAULT_SCENE_INDEX

    def scene_nodes(self, scene: pygltflib.Scene) -> Set[int]:
        """All node indices reachable from a scene's root nodes."""
        return self.subtree_nodes(scene.nodes or [])

    def skins_for_scene(self, scene: pygltflib.Scene) -> List[pygltflib.Skin]:
        """Skins whose first joint belongs to the scene."""
        found = self.scene_nodes(scene)
        return [skin for skin in self.gltf.skins if skin.joints and skin.joints[0] in found]

    def find_skin_root(self, skin: pygltflib.Skin) -> Optional[int]:
        """
        Find which joint of a skin is the ancestor of all the others.

        Args:
            skin: glTF skin

        Returns:
            Root node index, or None if the skin has no joints
        """
        if not skin.joints:
            return None

        # Parent map restricted to the skin's own joints
        parents: Dict[int, int] = {}
        for node_idx in skin.joints:
            for child_idx in self.gltf.nodes[node_idx].children or []:
                parents[child_idx] = node_idx

        root = skin.joints[0]
        visited = {root}
        while root in parents:
            root = parents[root]
            if root in visited:
                raise GltfImportError(f"Skin joint hierarchy contains a cycle at node #{root}")
            visited.add(root)

        return root

    def subtree_nodes(self, roots: List[int]) -> Set[int]:
        """All node indices at or below the given roots."""
        found: Set[int] = set()
        stack = list(roots)

        while stack:
            node_idx = stack.pop()
            if node_idx in found:
                continue
            found.add(node_idx)
            stack.extend(self.gltf.nodes[node_idx].children or [])

        return found

    def _outermost(self, roots: Set[int]) -> List[int]:
        """Drop roots that lie inside another root's subtree, keep index order."""
        nested: Set[int] = set()
        for root in roots:
            stack = list(self.gltf.nodes[root].children or [])
            while stack:
                node_idx = stack.pop()
                if node_idx in roots:
                    nested.add(node_idx)
                stack.extend(self.gltf.nodes[node_idx].children or [])

        for node_idx in sorted(nested):
            logger.info("Skin root node #%d is part of another skeleton root, merging.", node_idx)

        return sorted(roots - nested)

    def _build_tree(self, root: int, skeleton: Skeleton, names: JointNameRegistry):
        """Append the joints under a root in depth-first pre-order."""
        # (node index, parent joint index)
        stack = [(root, None)]

        while stack:
            node_idx, parent = stack.pop()
            node = self.gltf.nodes[node_idx]

            joint = skeleton.add_joint(names.assign(node_idx, node.name), parent=parent, node_index=node_idx)
            self.resolve_transform(node, joint)

            # Reversed so children come off the stack in source order
            for child_idx in reversed(node.children or []):
                stack.append((child_idx, joint.index))

    def resolve_transform(self, node: pygltflib.Node, joint: Joint):
        """
        Copy a node's rest transform onto a joint.

        Args:
            node: glTF node
            joint: Joint to update

        Raises:
            GltfImportError: The node stores its transform as a matrix
        """
        if node.matrix:
            # Animated nodes may only use TRS properties, never a matrix
            raise GltfImportError(
                f"Node '{node.name}' transformation matrix is not empty. "
                "This is disallowed by glTF as this node is an animation target"
            )

        if node.translation is not None:
            t = node.translation
            joint.translation = Vector3([t[0], t[1], t[2]])

        if node.rotation is not None:
            q = node.rotation  # [x, y, z, w], same layout as pyrr
            joint.rotation = Quaternion([q[0], q[1], q[2], q[3]])

        if node.scale is not None:
            s = node.scale
            joint.scale = Vector3([s[0], s[1], s[2]])
