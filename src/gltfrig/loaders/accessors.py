"""
Accessor reading

Decodes glTF accessor data into numpy arrays.
"""

from typing import Dict, Optional

import numpy as np
import pygltflib

from ..errors import AccessorError


COMPONENT_TYPE_SIZES = {
    5120: 1,  # BYTE
    5121: 1,  # UNSIGNED_BYTE
    5122: 2,  # SHORT
    5123: 2,  # UNSIGNED_SHORT
    5125: 4,  # UNSIGNED_INT
    5126: 4,  # FLOAT
}

COMPONENT_DTYPES = {
    5120: np.int8,
    5121: np.uint8,
    5122: np.int16,
    5123: np.uint16,
    5125: np.uint32,
    5126: np.float32,
}

COMPONENT_COUNTS = {
    'SCALAR': 1,
    'VEC2': 2,
    'VEC3': 3,
    'VEC4': 4,
    'MAT2': 4,
    'MAT3': 9,
    'MAT4': 16,
}

FLOAT_COMPONENT = 5126


class AccessorReader:
    """
    Reads typed arrays out of a glTF document's buffers.

    Buffer contents are cached per buffer index for the lifetime of the reader.
    """

    def __init__(self, gltf: pygltflib.GLTF2):
        self.gltf = gltf
        self._buffers: Dict[int, bytes] = {}

    def _buffer_data(self, buffer_idx: int) -> bytes:
        if buffer_idx not in self._buffers:
            buffer = self.gltf.buffers[buffer_idx]
            if buffer.uri:
                # External buffer file or data URI
                data = self.gltf.get_data_from_buffer_uri(buffer.uri)
            else:
                # Embedded buffer (GLB)
                data = self.gltf.binary_blob()
            if data is None:
                raise AccessorError(f"Buffer #{buffer_idx} has no data")
            self._buffers[buffer_idx] = bytes(data)
        return self._buffers[buffer_idx]

    def element_size(self, accessor_idx: int) -> int:
        accessor = self.gltf.accessors[accessor_idx]
        return COMPONENT_TYPE_SIZES[accessor.componentType] * COMPONENT_COUNTS[accessor.type]

    def read(self, accessor_idx: int) -> np.ndarray:
        """
        Get data from an accessor.

        Args:
            accessor_idx: Accessor index

        Returns:
            Array of shape (count,) for scalars, (count, components) otherwise

        Raises:
            AccessorError: The accessor is sparse or reads past its buffer view
        """
        accessor = self.gltf.accessors[accessor_idx]
        if accessor.sparse is not None:
            raise AccessorError(f"Sparse accessor #{accessor_idx} is not supported")

        component_count = COMPONENT_COUNTS[accessor.type]
        dtype = COMPONENT_DTYPES[accessor.componentType]

        if accessor.bufferView is None:
            # No buffer view means all zeros
            array = np.zeros(accessor.count * component_count, dtype=dtype)
        else:
            buffer_view = self.gltf.bufferViews[accessor.bufferView]
            buffer_data = self._buffer_data(buffer_view.buffer)

            # Calculate offset and stride
            offset = (buffer_view.byteOffset or 0) + (accessor.byteOffset or 0)
            stride = buffer_view.byteStride or 0
            element_size = self.element_size(accessor_idx)

            view_end = (buffer_view.byteOffset or 0) + (buffer_view.byteLength or 0)
            read_end = offset + (accessor.count - 1) * (stride or element_size) + element_size
            if accessor.count and read_end > min(view_end, len(buffer_data)):
                raise AccessorError(
                    f"Accessor #{accessor_idx} reads past the end of buffer view #{accessor.bufferView}"
                )

            if stride == 0 or stride == element_size:
                # Tightly packed
                data = buffer_data[offset:offset + accessor.count * element_size]
            else:
                # Strided data
                data = bytearray()
                for i in range(accessor.count):
                    element_offset = offset + i * stride
                    data.extend(buffer_data[element_offset:element_offset + element_size])

            array = np.frombuffer(bytes(data), dtype=dtype)

        if component_count > 1:
            array = array.reshape(-1, component_count)
        return array

    def read_float(self, accessor_idx: int, accessor_type: str) -> np.ndarray:
        """
        Read a float accessor, checking its element layout first.

        Args:
            accessor_idx: Accessor index
            accessor_type: Expected glTF type ('SCALAR', 'VEC3', 'VEC4')

        Raises:
            AccessorError: The element size does not match a float of that type
        """
        accessor = self.gltf.accessors[accessor_idx]
        expected = COMPONENT_TYPE_SIZES[FLOAT_COMPONENT] * COMPONENT_COUNTS[accessor_type]
        actual = self.element_size(accessor_idx)

        if accessor.componentType != FLOAT_COMPONENT or actual != expected:
            raise AccessorError(
                f"Invalid buffer view access on accessor #{accessor_idx}. "
                f"Expected element size {expected} ({accessor_type} float), got {actual} instead"
            )
        if not accessor.count:
            raise AccessorError(f"Accessor #{accessor_idx} is empty")

        return self.read(accessor_idx).astype(np.float64)

    def authored_max(self, accessor_idx: int) -> Optional[float]:
        """First component of the accessor's declared max, if present."""
        maximum = self.gltf.accessors[accessor_idx].max
        if not maximum:
            return None
        return float(maximum[0])
