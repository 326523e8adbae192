"""
Parallax mapping node.

Offsets the UV coordinate along the tangent-space view direction using a
height map. Three modes trade quality for cost:

    MAPPING             single height sample, linear offset
    STEEP_MAPPING       layered ray march through the height field
    OCCLUSION_MAPPING   steep march plus interpolation between the last two layers

The view direction needs the camera position, so the node pulls in the
camera include.
"""

from ..graph.node import FunctionNode
from ..graph.pin import input_pin, output_pin
from ..ir.types import FLOAT, FLOAT2, FLOAT3, TEXTURE2D

CAMERA_INCLUDE = "camera.hlsl"

PARALLAX_MODES = ('MAPPING', 'STEEP_MAPPING', 'OCCLUSION_MAPPING')

_METHOD_NAMES = {
    'MAPPING': "ParallaxMapping",
    'STEEP_MAPPING': "SteepParallaxMapping",
    'OCCLUSION_MAPPING': "ParallaxOcclusionMapping",
}

_VIEW_DIR = """\
float3x3 tbn = float3x3(tangent, bitangent, normal);
float3 viewDir = normalize(mul(tbn, GetCameraPos() - position));"""

_SIMPLE = _VIEW_DIR + """
float height = heightMap.Sample(heightMapSampler, uv).r;
float2 p = viewDir.xy / viewDir.z * (height * heightScale);
return uv - p;"""

_MARCH = _VIEW_DIR + """
float numLayers = lerp(maxLayers, minLayers, abs(dot(float3(0.0, 0.0, 1.0), viewDir)));
float layerDepth = 1.0 / numLayers;
float currentLayerDepth = 0.0;
float2 deltaUV = viewDir.xy * heightScale / numLayers;
float2 currentUV = uv;
float currentDepth = heightMap.SampleLevel(heightMapSampler, currentUV, 0).r;
[loop]
while (currentLayerDepth < currentDepth)
{
    currentUV -= deltaUV;
    currentDepth = heightMap.SampleLevel(heightMapSampler, currentUV, 0).r;
    currentLayerDepth += layerDepth;
}"""

_STEEP = _MARCH + """
return currentUV;"""

_OCCLUSION = _MARCH + """
float2 prevUV = currentUV + deltaUV;
float afterDepth = currentDepth - currentLayerDepth;
float beforeDepth = heightMap.SampleLevel(heightMapSampler, prevUV, 0).r - currentLayerDepth + layerDepth;
float weight = afterDepth / (afterDepth - beforeDepth);
return lerp(currentUV, prevUV, weight);"""

_BODIES = {
    'MAPPING': _SIMPLE,
    'STEEP_MAPPING': _STEEP,
    'OCCLUSION_MAPPING': _OCCLUSION,
}


class ParallaxMapNode(FunctionNode):
    type_name = "ParallaxMap"
    PROPERTIES = {'mode': 'MAPPING'}
    pin_properties = ('mode',)
    return_type = FLOAT2
    includes = (CAMERA_INCLUDE,)

    def _mode(self) -> str:
        mode = self.properties['mode']
        if mode not in PARALLAX_MODES:
            raise ValueError(f"Unknown parallax mode '{mode}', expected one of {PARALLAX_MODES}")
        return mode

    def initialize(self, graph):
        mode = self._mode()
        self.add_or_get_pin(input_pin("Height Map", TEXTURE2D))
        self.add_or_get_pin(input_pin("UV", FLOAT2, "input.tex"))
        self.add_or_get_pin(input_pin("Position", FLOAT3, "input.pos.xyz"))
        self.add_or_get_pin(input_pin("Normal", FLOAT3, "input.normal"))
        self.add_or_get_pin(input_pin("Tangent", FLOAT3, "input.tangent"))
        self.add_or_get_pin(input_pin("Bitangent", FLOAT3, "input.bitangent"))
        self.add_or_get_pin(input_pin("Height Scale", FLOAT, "0.05"))
        # Layer bounds only exist for the marching modes
        if mode != 'MAPPING':
            self.add_or_get_pin(input_pin("Min Layers", FLOAT, "8.0"))
            self.add_or_get_pin(input_pin("Max Layers", FLOAT, "32.0"))
        self.add_or_get_pin(output_pin("UV Offset", FLOAT2))

    def resolve_method_name(self, context):
        return _METHOD_NAMES[self._mode()]

    def method_body(self, context, table):
        return _BODIES[self._mode()]
