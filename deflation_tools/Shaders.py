# deflation_tools/Shaders.py
"""GLSL sources for the tile shader program (OpenGL 3.1 core, GLSL 1.40)."""

TILE_VERTEX_SHADER = """
#version 140

in vec2 position;
in float tile_type;

out float v_tile_type;

void main()
{
    v_tile_type = tile_type;
    gl_Position = vec4(position, 0.0, 1.0);
}
"""

TILE_FRAGMENT_SHADER = """
#version 140

in float v_tile_type;

out vec4 frag_color;

uniform vec3 kite_color;
uniform vec3 dart_color;
uniform vec3 stroke_color;
uniform int outline;

void main()
{
    vec3 color = v_tile_type < 0.5 ? kite_color : dart_color;
    if (outline == 1) {
        color = stroke_color;
    }
    frag_color = vec4(color, 1.0);
}
"""

# name -> (vertex source, fragment source)
SHADER_SOURCES = {
    'tiles': (TILE_VERTEX_SHADER, TILE_FRAGMENT_SHADER),
}
