from __future__ import annotations

def _pick_glsl_version(ctx_version_code: int) -> int:
    """Pick a GLSL version compatible with the active OpenGL context.

    - For OpenGL >= 3.3: use GLSL 330
    - Otherwise: GLSL 150 (OpenGL 3.2)
    """
    if ctx_version_code >= 330:
        return 330
    return 150

_VERT_BODY = """
in vec3 in_pos;
in vec2 in_uv;

uniform mat4 u_proj;
uniform mat4 u_view;

out vec3 v_world_pos;
out vec2 v_uv;

void main() {
    v_world_pos = in_pos;
    v_uv = in_uv;
    gl_Position = u_proj * u_view * vec4(in_pos, 1.0);
}
"""

_FRAG_BODY = """in vec3 v_world_pos;
in vec2 v_uv;

uniform sampler2D u_atlas;
uniform vec3 u_cam_pos;
uniform float u_fog_start;
uniform float u_fog_end;

out vec4 f_color;

void main() {
    vec3 base = texture(u_atlas, v_uv).rgb;

    // Flat per-face shading from the screen-space normal: tops bright, sides darker.
    vec3 n = normalize(cross(dFdx(v_world_pos), dFdy(v_world_pos)));
    float light = 0.60 + 0.40 * abs(n.y) + 0.10 * abs(n.x);
    vec3 col = base * light;

    float dist = length(v_world_pos.xz - u_cam_pos.xz);
    float fog_amount = smoothstep(u_fog_start, u_fog_end, dist);
    vec3 fog_col = vec3(0.62, 0.78, 0.95);
    col = mix(col, fog_col, fog_amount);

    f_color = vec4(col, 1.0);
}"""

def shader_sources(ctx_version_code: int) -> tuple[str, str]:
    ver = _pick_glsl_version(ctx_version_code)
    prefix = f"#version {ver}\n"
    return prefix + _VERT_BODY, prefix + _FRAG_BODY
