from stickynotes.notes.model import geometry


class TestGeometry:

    def test_in_resize_area(self):
        assert geometry.in_resize_area(340, 300, 360, 320) is True
        assert geometry.in_resize_area(330, 290, 360, 320) is True
        assert geometry.in_resize_area(329, 300, 360, 320) is False
        assert geometry.in_resize_area(340, 289, 360, 320) is False
        assert geometry.in_resize_area(10, 10, 360, 320) is False

    def test_clamp_size(self):
        assert geometry.clamp_size(100, 100) == (250, 180)
        assert geometry.clamp_size(500, 100) == (500, 180)
        assert geometry.clamp_size(360, 320) == (360, 320)

    def test_resized(self):
        assert geometry.resized(360, 320, 40, -20) == (400, 300)
        assert geometry.resized(360, 320, -200, -200) == (250, 180)

    def test_next_note_position(self):
        assert geometry.next_note_position() == (100, 100)
        assert geometry.next_note_position(0, 0) == (30, 30)
        assert geometry.next_note_position(-50, 400) == (-20, 430)
        assert geometry.next_note_position(10, None) == (100, 100)
