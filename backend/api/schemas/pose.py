"""
Pose API Schemas

Pydantic models for landmark frames sent by the pose provider.
These define the JSON structure accepted from the frontend.
"""

from pydantic import BaseModel, Field, conlist
from typing import List, Union

from core.domain.pose import LANDMARK_COUNT, PoseFrame, PoseLandmark


class LandmarkSchema(BaseModel):
    """
    Single body landmark.

    Coordinates are normalized image coordinates; they may fall slightly
    outside 0-1 when a joint leaves the frame. A landmark the model did not
    detect is sent with visibility 0.
    """
    x: float = Field(..., description="Horizontal position (0=left, 1=right)")
    y: float = Field(..., description="Vertical position (0=top, 1=bottom)")
    z: float = Field(0.0, description="Depth (negative=closer to camera)")
    visibility: float = Field(..., ge=0.0, le=1.0, description="Detection confidence")

    class Config:
        json_schema_extra = {
            "example": {
                "x": 0.45,
                "y": 0.32,
                "z": -0.15,
                "visibility": 0.95,
            }
        }

    def to_domain(self) -> PoseLandmark:
        return PoseLandmark(x=self.x, y=self.y, z=self.z, visibility=self.visibility)


# [x, y, z, visibility], the compact form used in stored analyses
LandmarkList = conlist(float, min_length=4, max_length=4)


class PoseFrameSchema(BaseModel):
    """
    All 33 landmarks of one video frame.

    Landmarks may be given as objects or as compact [x, y, z, visibility]
    lists, in body-part order.
    """
    frame_index: int = Field(..., ge=0, alias="frameIndex", description="Position in the recording")
    timestamp: float = Field(..., ge=0.0, description="Seconds since the start of the recording")
    landmarks: List[Union[LandmarkList, LandmarkSchema]] = Field(
        ...,
        min_length=LANDMARK_COUNT,
        max_length=LANDMARK_COUNT,
        description="33 body landmarks",
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "frameIndex": 0,
                "timestamp": 0.0,
                "landmarks": [[0.5, 0.2, 0.0, 0.99]] * LANDMARK_COUNT,
            }
        }

    def to_domain(self) -> PoseFrame:
        landmarks = tuple(
            lm.to_domain() if isinstance(lm, LandmarkSchema) else PoseLandmark.from_list(lm)
            for lm in self.landmarks
        )
        return PoseFrame(frame_index=self.frame_index, timestamp=self.timestamp, landmarks=landmarks)


class PoseFrameOutSchema(BaseModel):
    """Frame as echoed back in an analysis, landmarks in compact form."""
    frame_index: int = Field(..., alias="frameIndex")
    timestamp: float
    landmarks: List[List[float]]

    class Config:
        populate_by_name = True
