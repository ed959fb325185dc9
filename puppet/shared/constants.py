"""Landmark index tables and rig role names.

The index tables are the data contract with the MediaPipe Holistic
detectors: the 33-point BlazePose body topology and the 468/478-point
face mesh. Role names follow the naming convention rig authors use for
part ids in the illustration SVG.
"""

# MediaPipe BlazePose (33 landmarks) index for each body joint role
POSE_PART_TO_INDEX = {
    "nose": 0,
    "leftEye": 2,
    "rightEye": 5,
    "leftEar": 7,
    "rightEar": 8,
    "leftShoulder": 11,
    "rightShoulder": 12,
    "leftElbow": 13,
    "rightElbow": 14,
    "leftWrist": 15,
    "rightWrist": 16,
    "leftHip": 23,
    "rightHip": 24,
    "leftKnee": 25,
    "rightKnee": 26,
    "leftAnkle": 27,
    "rightAnkle": 28,
}

POSE_JOINT_NAMES = tuple(POSE_PART_TO_INDEX)

# Face mesh index for each facial control point.
# "left"/"right" are the subject's sides, as in the body table.
FACE_PART_TO_INDEX = {
    "leftEyeOuter": 263,
    "leftEyeInner": 362,
    "leftEyeTop": 386,
    "leftEyeBottom": 374,
    "rightEyeOuter": 33,
    "rightEyeInner": 133,
    "rightEyeTop": 159,
    "rightEyeBottom": 145,
    "leftBrow": 334,
    "rightBrow": 105,
    "noseTip": 1,
    "mouthTop": 13,
    "mouthBottom": 14,
    "mouthLeft": 291,
    "mouthRight": 61,
    "faceTop": 10,
    "faceBottom": 152,
    # Cheeks are not read by the engine; they pin the face contract to the
    # 468/478-point mesh (highest index 454)
    "leftCheek": 454,
    "rightCheek": 234,
}

FACE_PART_NAMES = tuple(FACE_PART_TO_INDEX)

# Limb segment role -> (start joint, end joint)
LIMB_SEGMENTS = {
    "leftUpperArm": ("leftShoulder", "leftElbow"),
    "leftLowerArm": ("leftElbow", "leftWrist"),
    "rightUpperArm": ("rightShoulder", "rightElbow"),
    "rightLowerArm": ("rightElbow", "rightWrist"),
    "leftUpperLeg": ("leftHip", "leftKnee"),
    "leftLowerLeg": ("leftKnee", "leftAnkle"),
    "rightUpperLeg": ("rightHip", "rightKnee"),
    "rightLowerLeg": ("rightKnee", "rightAnkle"),
}

# Facial bones driven by the face frame. Eyes and nose fall back to the
# body detector's joints when no face frame is available.
FACE_BONE_ROLES = ("leftEye", "rightEye", "nose", "mouth", "leftBrow", "rightBrow")

HEAD_ROLE = "head"

REQUIRED_ROLES = ("head", "leftShoulder", "rightShoulder")

ALL_ROLES = frozenset(POSE_JOINT_NAMES) | frozenset(LIMB_SEGMENTS) | frozenset(
    FACE_BONE_ROLES
) | {HEAD_ROLE}

# Roles that move with each arm when the draw order is overridden
ARM_ROLES = {
    "left": ("leftElbow", "leftWrist", "leftUpperArm", "leftLowerArm"),
    "right": ("rightElbow", "rightWrist", "rightUpperArm", "rightLowerArm"),
}

# Expression blend weights reported per frame
BLEND_NAMES = (
    "leftEyeOpen",
    "rightEyeOpen",
    "mouthOpen",
    "leftBrowRaise",
    "rightBrowRaise",
)

# Skeleton drawn by the detection debug overlay (joint pairs)
DEBUG_SKELETON_CONNECTIONS = [
    ("leftShoulder", "rightShoulder"),
    ("leftShoulder", "leftHip"),
    ("rightShoulder", "rightHip"),
    ("leftHip", "rightHip"),
    *LIMB_SEGMENTS.values(),
]
