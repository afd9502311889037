"""Built-in layers for the Porto do Itaqui area and default map view."""

from __future__ import annotations

from portmap.layers.geometry import Coordinate, Marker, Polygon
from portmap.layers.layer import Layer, LayerDetails

MAP_CENTER = Coordinate(lat=-2.570, lng=-44.370)
ZOOM_LEVEL = 14


def _ring(*points: tuple[float, float]) -> tuple[Coordinate, ...]:
    return tuple(Coordinate(lat=lat, lng=lng) for lat, lng in points)


INITIAL_LAYERS: list[Layer] = [
    Layer(
        id="layer-poligonal",
        name="Poligonal do Porto (Oficial)",
        description="Área delimitada oficial do Porto do Itaqui.",
        color="#ef4444",
        features=[Polygon((_ring(
            (-2.550, -44.380),
            (-2.555, -44.360),
            (-2.580, -44.355),
            (-2.590, -44.370),
            (-2.580, -44.390),
            (-2.550, -44.380),
        ),))],
        details=LayerDetails(
            title="Poligonal Oficial",
            content=(
                "Limite administrativo e operacional da EMAP "
                "(Empresa Maranhense de Administração Portuária)."
            ),
        ),
    ),
    Layer(
        id="layer-mangue",
        name="Zona de Amortecimento (Manguezal)",
        description="Áreas de preservação ambiental no entorno.",
        color="#22c55e",
        features=[Polygon((_ring(
            (-2.590, -44.370),
            (-2.600, -44.360),
            (-2.610, -44.380),
            (-2.600, -44.395),
            (-2.590, -44.370),
        ),))],
        details=LayerDetails(
            title="Área de Preservação",
            content=(
                "Ecossistema de manguezal vital para a biodiversidade local "
                "e proteção da linha costeira."
            ),
        ),
    ),
    Layer(
        id="layer-community",
        name="Comunidade Vila Maranhão",
        description="Área residencial próxima à zona portuária.",
        color="#eab308",
        features=[Polygon((_ring(
            (-2.580, -44.355),
            (-2.585, -44.340),
            (-2.595, -44.345),
            (-2.590, -44.360),
        ),))],
        details=LayerDetails(
            title="Vila Maranhão",
            content=(
                "Comunidade histórica impactada pela logística portuária. "
                "Foco de projetos de responsabilidade social."
            ),
        ),
    ),
    Layer(
        id="layer-marker-main",
        name="Sede Administrativa EMAP",
        description="Centro de controle do porto.",
        color="#3b82f6",
        features=[Marker(Coordinate(lat=-2.570, lng=-44.370))],
        details=LayerDetails(
            title="Sede EMAP",
            content="Centro administrativo e operacional do Porto do Itaqui.",
        ),
    ),
    Layer(
        id="layer-access",
        name="Acesso Ferroviário",
        description="Linha férrea de transporte de minério e grãos.",
        color="#a855f7",
        visible=False,
        features=[Polygon((_ring(
            (-2.585, -44.340),
            (-2.580, -44.330),
            (-2.575, -44.335),
            (-2.580, -44.345),
        ),))],
        details=LayerDetails(
            title="Ramal Ferroviário",
            content="Conexão crítica para exportação de commodities.",
        ),
    ),
]
