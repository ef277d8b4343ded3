"""
Fusion Room video pipeline

Callable frame source for video hosts that pull frames as torch tensors.
Each call reads all runtime parameters from kwargs (so a host UI can change
any slider between frames), renders one FusionRoom tick and returns it.

Usage:
    pipe = FusionRoomPipeline(face_a, face_b, size=512)
    out = pipe(blend=0.5, zoom=1.5, spin=30, warp=8)
    out["video"].shape   # (1, 512, 512, 3) float32 [0, 1]
"""

import logging

import torch

from .presets import CANVAS_SIZE, ROOM_TILES
from .session import FusionRoom

logger = logging.getLogger(__name__)

RUNTIME_KEYS = ("blend", "zoom", "spin", "warp")


class FusionRoomPipeline:
    """Wraps a FusionRoom as a {"video": tensor} frame source.

    Args:
        image_a, image_b: Source rasters (any size, fitted to the canvas)
        size: Canvas edge length
        tiles: Tile grid of the spin layer
        workers: Threads for the fractal field
    """

    def __init__(self, image_a, image_b, size=CANVAS_SIZE, tiles=ROOM_TILES, workers=1):
        self.room = FusionRoom(image_a, image_b, size=size, tiles=tiles, workers=workers)
        logger.info("FusionRoomPipeline ready at %dx%d", size, size)

    def __call__(self, prompt="", **kwargs):
        """Render the next frame.

        Args:
            prompt: Ignored (no text conditioning)
            **kwargs: Runtime parameters:
                blend (float): Mix of A and B, 0-1
                zoom (float): Fractal magnification, > 0
                spin (float): Tile rotation offset in degrees
                warp (float): Seam ripple and goovie strength, >= 0
                reset (bool): Restart the animation clock

        Returns:
            {"video": tensor} where tensor is (1, H, W, 3) float32 [0, 1]
        """
        unknown = set(kwargs) - set(RUNTIME_KEYS) - {"reset"}
        if unknown:
            logger.warning("ignoring unknown pipeline params: %s", sorted(unknown))
        if kwargs.get("reset", False):
            self.room.reset_clock()
        self.room.set_params(**{k: kwargs[k] for k in RUNTIME_KEYS if k in kwargs})

        frame_np = self.room.render_float()
        tensor = torch.from_numpy(frame_np.copy()).unsqueeze(0)
        return {"video": tensor}
