# deflation_tools/OptimizedRenderer.py
import ctypes
import logging

import numpy as np
from OpenGL.GL import *
import glfw

from .Operations import Operations
from .ShaderManager import ShaderManager

op = Operations()

# Two triangles per tile, fanned from the anchor so the concave dart is covered.
FILL_PATTERN = np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32)
OUTLINE_PATTERN = np.array([0, 1, 1, 2, 2, 3, 3, 0], dtype=np.uint32)


class OptimizedRenderer:
    def __init__(self, operations=op):
        """Initialize the renderer after OpenGL context is created."""
        self.logger = logging.getLogger('OptimizedRenderer')
        self.operations = operations
        self.buffer_key = None
        self.fill_count = 0
        self.outline_count = 0

        # Verify we have a valid OpenGL context before creating shader manager
        if not glfw.get_current_context():
            raise RuntimeError("OptimizedRenderer requires an active OpenGL context")

        self.shader_manager = ShaderManager()

        self.vao = glGenVertexArrays(1)
        self.vbo = glGenBuffers(1)
        self.fill_ebo = glGenBuffers(1)
        self.outline_ebo = glGenBuffers(1)

    def transform_to_gl_space(self, points, width, height):
        """Transform window coordinates to OpenGL coordinate space."""
        gl_points = np.empty_like(points)
        gl_points[..., 0] = 2.0 * points[..., 0] / width - 1.0
        gl_points[..., 1] = 1.0 - 2.0 * points[..., 1] / height
        return gl_points

    def setup_buffers(self, tiles, width, height):
        """Upload tile corners and index buffers for fill and outline passes."""
        corners = self.transform_to_gl_space(self.operations.tile_polygons(tiles), width, height)
        tile_types = np.array([float(tile.kind) for tile in tiles], dtype=np.float32)

        # Per vertex: x, y, tile_type
        vertices = np.empty((len(tiles), 4, 3), dtype=np.float32)
        vertices[..., :2] = corners
        vertices[..., 2] = tile_types[:, None]
        self.vertices_array = vertices.reshape(-1)

        offsets = (np.arange(len(tiles), dtype=np.uint32) * 4)[:, None]
        fill_indices = (offsets + FILL_PATTERN).reshape(-1)
        outline_indices = (offsets + OUTLINE_PATTERN).reshape(-1)
        self.fill_count = len(fill_indices)
        self.outline_count = len(outline_indices)

        glBindVertexArray(self.vao)

        glBindBuffer(GL_ARRAY_BUFFER, self.vbo)
        glBufferData(GL_ARRAY_BUFFER, self.vertices_array.nbytes,
                     self.vertices_array, GL_STATIC_DRAW)

        stride = 3 * ctypes.sizeof(GLfloat)

        # Position attribute (location 0)
        glEnableVertexAttribArray(0)
        glVertexAttribPointer(0, 2, GL_FLOAT, GL_FALSE, stride, ctypes.c_void_p(0))

        # Tile type attribute (location 1)
        glEnableVertexAttribArray(1)
        glVertexAttribPointer(1, 1, GL_FLOAT, GL_FALSE, stride,
                              ctypes.c_void_p(2 * ctypes.sizeof(GLfloat)))

        glBindVertexArray(0)

        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self.fill_ebo)
        glBufferData(GL_ELEMENT_ARRAY_BUFFER, fill_indices.nbytes, fill_indices, GL_STATIC_DRAW)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self.outline_ebo)
        glBufferData(GL_ELEMENT_ARRAY_BUFFER, outline_indices.nbytes, outline_indices, GL_STATIC_DRAW)

        glBindBuffer(GL_ARRAY_BUFFER, 0)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, 0)

        self.logger.debug(f"Uploaded {len(tiles)} tiles ({self.vertices_array.nbytes} bytes)")

    def set_color_uniforms(self, shader_program, config_data):
        for name in ('kite_color', 'dart_color', 'stroke_color'):
            loc = glGetUniformLocation(shader_program, name)
            if loc != -1:
                glUniform3f(loc, *(np.array(config_data[name]) / 255.0))

    def render_tiles(self, width, height, config_data, generations=None):
        """Draw the tiling; buffers are rebuilt only when the size or generation changes."""
        if generations is None:
            generations = config_data['generations']

        cache_key = (width, height, generations)
        if cache_key != self.buffer_key:
            tiles = self.operations.tiling(width, height, generations)
            self.setup_buffers(tiles, width, height)
            self.buffer_key = cache_key

        background = np.array(config_data['background']) / 255.0
        glClearColor(*background, 1.0)
        glClear(GL_COLOR_BUFFER_BIT)

        shader_program = self.shader_manager.program()
        glUseProgram(shader_program)
        self.set_color_uniforms(shader_program, config_data)
        outline_loc = glGetUniformLocation(shader_program, 'outline')

        glBindVertexArray(self.vao)

        glUniform1i(outline_loc, 0)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self.fill_ebo)
        glDrawElements(GL_TRIANGLES, self.fill_count, GL_UNSIGNED_INT, None)

        glUniform1i(outline_loc, 1)
        glBindBuffer(GL_ELEMENT_ARRAY_BUFFER, self.outline_ebo)
        glDrawElements(GL_LINES, self.outline_count, GL_UNSIGNED_INT, None)

        glBindVertexArray(0)
        glUseProgram(0)

    def cleanup(self):
        """Clean up OpenGL resources."""
        if glfw.get_current_context():
            glDeleteVertexArrays(1, [self.vao])
            glDeleteBuffers(3, [self.vbo, self.fill_ebo, self.outline_ebo])
        self.shader_manager.cleanup()
