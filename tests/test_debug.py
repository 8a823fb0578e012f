import numpy as np
from eyewearkit.face.landmarks import select_landmarks
from eyewearkit.viz.debug import DebugRenderer

def fake_face():
    pts = np.zeros((468,3), dtype=float)
    pts[33,:2] = [0.40,0.45]; pts[263,:2] = [0.60,0.45]
    pts[133,:2] = [0.46,0.45]; pts[362,:2] = [0.54,0.45]
    pts[168,:2] = [0.50,0.44]
    pts[127,:2] = [0.30,0.55]; pts[356,:2] = [0.70,0.50]
    return pts

def has_color(img, bgr):
    return bool(np.all(img == np.array(bgr, dtype=np.uint8), axis=-1).any())

def test_draws_corners_ears_and_lines():
    pts = fake_face()
    img = np.zeros((480,640,3), np.uint8)
    out = DebugRenderer().draw(img, pts, select_landmarks(pts), "left")
    assert out is img
    assert tuple(img[216, 256]) == DebugRenderer.GREEN     # left outer corner
    assert tuple(img[240, 448]) == DebugRenderer.YELLOW    # right ear
    assert has_color(img, DebugRenderer.PURPLE)
    assert has_color(img, DebugRenderer.ORANGE)

def test_no_ear_line_without_direction():
    pts = fake_face()
    img = np.zeros((480,640,3), np.uint8)
    DebugRenderer(show_mesh=False).draw(img, pts, select_landmarks(pts), "unknown")
    assert not has_color(img, DebugRenderer.ORANGE)

def test_mesh_only_when_no_named_points():
    img = np.zeros((480,640,3), np.uint8)
    DebugRenderer().draw(img, fake_face(), None)
    assert has_color(img, DebugRenderer.RED)
    assert not has_color(img, DebugRenderer.PURPLE)

def test_glasses_image_follows_eye_line():
    pts = fake_face()
    glasses = np.zeros((20,100,4), np.uint8); glasses[:] = (255,0,0,255)
    img = np.zeros((480,640,3), np.uint8)
    DebugRenderer(glasses=glasses, show_mesh=False).draw(img, pts, select_landmarks(pts), "unknown")
    assert tuple(img[224, 320]) == (255,0,0)
    assert tuple(img[300, 320]) == (0,0,0)

def test_missing_glasses_asset_is_skipped():
    pts = fake_face()
    img = np.zeros((480,640,3), np.uint8)
    DebugRenderer(glasses=None, show_mesh=False).draw(img, pts, select_landmarks(pts), "unknown")
    assert tuple(img[224, 320]) == (0,0,0)

def orange_xs(img):
    ys, xs = np.nonzero(np.all(img == np.array(DebugRenderer.ORANGE, dtype=np.uint8), axis=-1))
    return xs

def tilted_face(lear, rear):
    pts = fake_face()
    pts[127,:2] = lear; pts[356,:2] = rear
    return pts

def test_ear_line_goes_to_the_lower_ear():
    # left ear lower in the image -> "left" -> line towards the left ear (x=192px)
    pts = tilted_face((0.30,0.60), (0.70,0.40))
    img = np.zeros((480,640,3), np.uint8)
    DebugRenderer(show_mesh=False).draw(img, pts, select_landmarks(pts), "left")
    xs = orange_xs(img)
    assert xs.size and xs.max() < 320 and xs.min() < 240

    pts = tilted_face((0.30,0.40), (0.70,0.60))
    img = np.zeros((480,640,3), np.uint8)
    DebugRenderer(show_mesh=False).draw(img, pts, select_landmarks(pts), "right")
    xs = orange_xs(img)
    assert xs.size and xs.min() > 320 and xs.max() > 400

def test_gray_glasses_image_is_converted():
    pts = fake_face()
    img = np.zeros((480,640,3), np.uint8)
    gray = np.full((20,100,1), 200, np.uint8)
    DebugRenderer(glasses=gray, show_mesh=False).draw(img, pts, select_landmarks(pts), "unknown")
    assert tuple(img[224, 320]) == (200,200,200)

def test_16bit_glasses_image_is_scaled_down():
    pts = fake_face()
    img = np.zeros((480,640,3), np.uint8)
    glasses = np.zeros((20,100,4), np.uint16); glasses[:] = (65535,0,0,65535)
    DebugRenderer(glasses=glasses, show_mesh=False).draw(img, pts, select_landmarks(pts), "unknown")
    assert tuple(img[224, 320]) == (255,0,0)

def test_unusable_glasses_image_is_skipped():
    pts = fake_face()
    img = np.zeros((480,640,3), np.uint8)
    r = DebugRenderer(glasses=np.ones((20,100,4), np.float32), show_mesh=False)
    assert r.glasses is None
    r.draw(img, pts, select_landmarks(pts), "unknown")
    assert tuple(img[224, 320]) == (0,0,0)
