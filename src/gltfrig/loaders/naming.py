"""
Joint naming

Runtime skeletons require every joint name to be non-empty and unique,
glTF node names are neither.
"""

import logging
from typing import Dict, Optional

from ..config.settings import UNNAMED_JOINT_PREFIX


logger = logging.getLogger(__name__)


class JointNameRegistry:
    """
    Assigns unique joint names to glTF nodes and remembers the association.

    One registry is filled while a skeleton is built and handed to the
    animation resampler afterwards, which only reads from it.
    """

    def __init__(self, prefix: str = UNNAMED_JOINT_PREFIX):
        self.prefix = prefix
        self._name_by_node: Dict[int, str] = {}
        self._node_by_name: Dict[str, int] = {}

    def assign(self, node_index: int, node_name: Optional[str]) -> str:
        """
        Create a unique name for a node.

        Empty names become "<prefix><index>"; a name already taken by another
        node gets "_<index>" appended. Node indices are unique, so the result is too.

        Args:
            node_index: glTF node index
            node_name: Name authored on the node (may be None or empty)

        Returns:
            The joint name
        """
        if node_index in self._name_by_node:
            return self._name_by_node[node_index]

        name = node_name or ""
        if not name:
            name = f"{self.prefix}{node_index}"
            logger.warning("Joint at node #%d has no name. Setting name to '%s'.", node_index, name)

        if name in self._node_by_name:
            other = self._node_by_name[name]
            name = f"{name}_{node_index}"
            # An authored name can already end in "_<index>"
            while name in self._node_by_name:
                name = f"{name}_{node_index}"
            logger.warning(
                "Joint at node #%d has the same name as node #%d. The joint will be renamed to '%s'.",
                node_index, other, name
            )

        self._name_by_node[node_index] = name
        self._node_by_name[name] = node_index
        return name

    def name_for(self, node_index: int) -> Optional[str]:
        return self._name_by_node.get(node_index)

    def node_for(self, name: str) -> Optional[int]:
        return self._node_by_name.get(name)

    def __contains__(self, node_index: int) -> bool:
        return node_index in self._name_by_node

    def __len__(self):
        return len(self._name_by_node)

    def __repr__(self):
        return f"JointNameRegistry(joints={len(self._name_by_node)})"
