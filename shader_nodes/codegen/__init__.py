# Shader source generation
