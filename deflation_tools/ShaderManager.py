# deflation_tools/ShaderManager.py
import re
import logging
from OpenGL.GL import *
import glfw

from .Shaders import SHADER_SOURCES


class ShaderManager:
    def __init__(self, sources=SHADER_SOURCES):
        """Initialize the shader manager after OpenGL context is created."""
        # Verify we have a valid OpenGL context
        if not glfw.get_current_context():
            raise RuntimeError("ShaderManager requires an active OpenGL context")

        self.sources = sources
        self.shader_programs = {}
        self.logger = logging.getLogger('ShaderManager')

        self.check_opengl_context()
        self.load_shaders()

        if not self.shader_programs:
            self.logger.critical("No shaders were loaded successfully.")
            raise RuntimeError("Failed to load any shader programs")

    def compile_shader(self, source, shader_type, name):
        """Compile a shader with detailed error checking."""
        shader = glCreateShader(shader_type)
        glShaderSource(shader, source)
        glCompileShader(shader)

        if not glGetShaderiv(shader, GL_COMPILE_STATUS):
            log = glGetShaderInfoLog(shader)
            log = log.decode() if isinstance(log, bytes) else log
            self.logger.error(f"{name} shader compilation failed:")
            self.logger.error(f"Shader source:\n{source}")
            self.logger.error(f"Error log: {log}")
            glDeleteShader(shader)
            raise RuntimeError(f"{name} shader compilation failed: {log}")

        self.logger.debug(f"{name} shader compiled successfully")
        return shader

    def compile_shader_program(self, vertex_src, fragment_src):
        """Compile and link a program; attribute 0 is position, 1 is tile_type."""
        vertex_shader = None
        fragment_shader = None
        program = None

        try:
            if not self.validate_shader_compatibility(vertex_src, fragment_src):
                raise RuntimeError("Shader validation failed: incompatible varying variables")

            program = glCreateProgram()
            if not program:
                raise RuntimeError(f"Failed to create shader program. GL Error: {glGetError()}")

            vertex_shader = self.compile_shader(vertex_src, GL_VERTEX_SHADER, "Vertex")
            fragment_shader = self.compile_shader(fragment_src, GL_FRAGMENT_SHADER, "Fragment")

            glAttachShader(program, vertex_shader)
            glAttachShader(program, fragment_shader)

            for location, name in {0: "position", 1: "tile_type"}.items():
                glBindAttribLocation(program, location, name)

            glLinkProgram(program)
            if not glGetProgramiv(program, GL_LINK_STATUS):
                log = glGetProgramInfoLog(program)
                self.logger.error(f"Linking failed: {log}")
                raise RuntimeError(f"Shader program linking failed: {log}")

            return program

        except Exception as e:
            self.logger.error(f"Error creating shader program: {e}")
            if program:
                glDeleteProgram(program)
            raise
        finally:
            # Shaders are no longer needed once the program is linked
            if vertex_shader:
                glDeleteShader(vertex_shader)
            if fragment_shader:
                glDeleteShader(fragment_shader)

    def validate_shader_compatibility(self, vertex_src, fragment_src):
        """Check that every fragment input is written by the vertex stage."""
        def extract(src, qualifier):
            pattern = rf'^\s*{qualifier}\s+(\w+)\s+(\w+)\s*;'
            return {name: var_type for var_type, name in re.findall(pattern, src, re.MULTILINE)}

        vertex_outputs = extract(vertex_src, 'out')
        fragment_inputs = extract(fragment_src, 'in')

        mismatched = {name: var_type for name, var_type in fragment_inputs.items()
                      if vertex_outputs.get(name) != var_type}
        if mismatched:
            self.logger.error("Mismatched varying variables between shaders:")
            self.logger.error(f"Vertex: {vertex_outputs}")
            self.logger.error(f"Fragment: {fragment_inputs}")
            return False

        return True

    def check_opengl_context(self):
        """Log OpenGL context information."""
        vendor = glGetString(GL_VENDOR)
        renderer = glGetString(GL_RENDERER)
        version = glGetString(GL_VERSION)
        glsl_version = glGetString(GL_SHADING_LANGUAGE_VERSION)

        if not all([vendor, renderer, version, glsl_version]):
            raise RuntimeError("Unable to get OpenGL context information")

        self.logger.info("OpenGL Context Information:")
        self.logger.info(f"Vendor: {vendor.decode()}")
        self.logger.info(f"Renderer: {renderer.decode()}")
        self.logger.info(f"OpenGL Version: {version.decode()}")
        self.logger.info(f"GLSL Version: {glsl_version.decode()}")

    def load_shaders(self):
        """Compile every program in the source table."""
        self.shader_programs.clear()
        for name, (vertex_src, fragment_src) in self.sources.items():
            try:
                self.shader_programs[name] = self.compile_shader_program(vertex_src, fragment_src)
                self.logger.info(f"Successfully loaded shader: {name}")
            except RuntimeError as e:
                self.logger.error(f"Error loading shader {name}: {e}")

    def program(self, name='tiles'):
        return self.shader_programs[name]

    def cleanup(self):
        """Delete shader programs while the context is still current."""
        if glfw.get_current_context():
            for program in self.shader_programs.values():
                glDeleteProgram(program)
        self.shader_programs.clear()
