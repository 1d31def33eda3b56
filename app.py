import asyncio
import os
from dataclasses import replace
from typing import List

import streamlit as st

from survival_canvas.config import DEFAULT_CONFIG, RenderConfig
from survival_canvas.entity import EntitySnapshot
from survival_canvas.renderer.assets import AssetStore, ResourceStatus
from survival_canvas.renderer.compositor import Compositor
from survival_canvas.renderer.surface import ImageSurface
from survival_canvas.types import AssetKind, EntityType, Position

script_dir: str = os.path.dirname(os.path.realpath(__file__))

BOARD_HEIGHT = 10
BOARD_WIDTH = 14
CELL_SIZE = 48

DEMO_ENTITIES: List[EntitySnapshot] = [
    EntitySnapshot(EntityType.ROCK, 0, Position(2, 2)),
    EntitySnapshot(EntityType.ROCK, 0, Position(9, 6)),
    EntitySnapshot(EntityType.BOX, 0, Position(5, 4)),
    EntitySnapshot(EntityType.BOX, 0, Position(6, 4)),
    EntitySnapshot(EntityType.PLAYER, 3, Position(7, 5)),
    EntitySnapshot(EntityType.ZOMBIE, 2, Position(11, 3)),
    EntitySnapshot(EntityType.ZOMBIE, 1, Position(3.5, 7)),
]


@st.cache_resource
def get_asset_store(asset_root: str) -> AssetStore:
    store = AssetStore.from_config(replace(DEFAULT_CONFIG, asset_root=asset_root))
    asyncio.run(store.load())
    return store


st.set_page_config(layout="wide", page_title="Survival Canvas")

asset_root = os.path.join(script_dir, "assets")
pixel_ratio = st.sidebar.select_slider(
    "Device pixel ratio", options=[1.0, 1.5, 2.0, 3.0], value=1.0
)
config: RenderConfig = replace(
    DEFAULT_CONFIG, asset_root=asset_root, device_pixel_ratio=pixel_ratio
)

store = get_asset_store(asset_root)
surface = ImageSurface()
compositor = Compositor(
    BOARD_HEIGHT, BOARD_WIDTH, surface, CELL_SIZE, config, assets=store
)
compositor.render(DEMO_ENTITIES)

st.image(surface.to_image(), width=int(surface.style_width))

failed = [
    kind
    for kind in AssetKind
    if store.result(kind).status == ResourceStatus.FAILED
]
if failed:
    st.warning(f"Missing assets under {asset_root}: {', '.join(failed)}", icon="🧟")
