"""
Skeleton

Represents a hierarchical skeleton structure with joints stored in a single
contiguous array.
"""

from typing import Dict, Iterator, List, Optional, Tuple
from pyrr import Vector3, Quaternion

from ..config.settings import HIERARCHY_INDENT
from ..errors import ValidationError


class Joint:
    """
    Represents a single joint (bone) in a skeleton hierarchy.

    Each joint has:
    - Rest transform (translation, rotation, scale relative to parent)
    - Parent/children links expressed as indices into Skeleton.joints
    - The index of the glTF node it was built from
    """

    def __init__(
        self,
        name: str,
        index: int,
        parent: Optional[int] = None,
        node_index: Optional[int] = None
    ):
        """
        Initialize a joint.

        Args:
            name: Unique joint name
            index: Joint index in skeleton
            parent: Parent joint index (None for root)
            node_index: Source glTF node index
        """
        self.name = name
        self.index = index
        self.parent = parent
        self.node_index = node_index
        self.children: List[int] = []

        # Rest pose, identity unless the node overrides a component
        self.translation = Vector3([0.0, 0.0, 0.0])
        self.rotation = Quaternion([0.0, 0.0, 0.0, 1.0])
        self.scale = Vector3([1.0, 1.0, 1.0])

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def __repr__(self):
        return f"Joint(name='{self.name}', index={self.index}, parent={self.parent}, children={len(self.children)})"


class Skeleton:
    """
    Hierarchical skeleton structure.

    Joints live in depth-first pre-order: every root is followed by its whole
    subtree, and a parent always precedes its children. This order is also the
    track order of every animation imported against the skeleton.
    """

    def __init__(self, name: str = "Skeleton"):
        """
        Initialize skeleton.

        Args:
            name: Skeleton name for debugging
        """
        self.name = name
        self.joints: List[Joint] = []
        self.roots: List[int] = []
        self.joint_by_name: Dict[str, Joint] = {}

    def add_joint(self, name: str, parent: Optional[int] = None, node_index: Optional[int] = None) -> Joint:
        """
        Append a joint and link it to its parent.

        Args:
            name: Joint name
            parent: Index of an already added joint, or None for a root
            node_index: Source glTF node index

        Returns:
            The new joint
        """
        joint = Joint(name, len(self.joints), parent=parent, node_index=node_index)
        self.joints.append(joint)
        self.joint_by_name.setdefault(name, joint)

        if parent is None:
            self.roots.append(joint.index)
        else:
            self.joints[parent].children.append(joint.index)

        return joint

    @property
    def num_joints(self) -> int:
        return len(self.joints)

    def joint_names(self) -> List[str]:
        """Joint names in skeleton order."""
        return [joint.name for joint in self.joints]

    def get_joint(self, name: str) -> Optional[Joint]:
        """
        Find a joint by name.

        Args:
            name: Joint name

        Returns:
            Joint if found, None otherwise
        """
        return self.joint_by_name.get(name)

    def children_of(self, joint: Joint) -> List[Joint]:
        return [self.joints[i] for i in joint.children]

    def depth_first(self) -> Iterator[Tuple[Joint, int]]:
        """
        Walk the hierarchy from every root.

        Yields:
            (joint, depth) pairs in depth-first pre-order
        """
        stack = [(root, 0) for root in reversed(self.roots)]
        while stack:
            index, depth = stack.pop()
            joint = self.joints[index]
            yield joint, depth
            for child in reversed(joint.children):
                stack.append((child, depth + 1))

    def validate(self):
        """
        Check structural invariants.

        Raises:
            ValidationError: Empty or duplicate names, or inconsistent links
        """
        if not self.roots:
            raise ValidationError(f"Skeleton '{self.name}'", "no root joints")

        seen = set()
        for joint in self.joints:
            if not joint.name:
                raise ValidationError(f"Skeleton '{self.name}'", f"joint #{joint.index} has an empty name")
            if joint.name in seen:
                raise ValidationError(f"Skeleton '{self.name}'", f"duplicate joint name '{joint.name}'")
            seen.add(joint.name)

            if joint.parent is not None:
                if not 0 <= joint.parent < joint.index:
                    raise ValidationError(
                        f"Skeleton '{self.name}'",
                        f"joint '{joint.name}' does not follow its parent"
                    )
                if joint.index not in self.joints[joint.parent].children:
                    raise ValidationError(
                        f"Skeleton '{self.name}'",
                        f"joint '{joint.name}' is missing from its parent's children"
                    )
            elif joint.index not in self.roots:
                raise ValidationError(f"Skeleton '{self.name}'", f"orphan joint '{joint.name}'")

            for child in joint.children:
                if self.joints[child].parent != joint.index:
                    raise ValidationError(
                        f"Skeleton '{self.name}'",
                        f"joint '{self.joints[child].name}' has the wrong parent"
                    )

    def describe(self) -> str:
        """Indented joint hierarchy, one joint per line."""
        return "\n".join(" " * (depth * HIERARCHY_INDENT) + joint.name for joint, depth in self.depth_first())

    def __repr__(self):
        return f"Skeleton(name='{self.name}', joints={len(self.joints)}, roots={len(self.roots)})"
