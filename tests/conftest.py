import pytest

import gifbuild

PALETTE4 = [(0, 0, 0), (255, 0, 0), (0, 255, 0), (0, 0, 255)]


@pytest.fixture
def palette4():
    return list(PALETTE4)


@pytest.fixture
def two_by_two_gif():
    # 2x2, 4 colors, indices [0, 1, 2, 3]
    return gifbuild.gif(2, 2, [gifbuild.image([0, 1, 2, 3], 2, 2)], gct=PALETTE4)


@pytest.fixture
def gif_file(tmp_path, two_by_two_gif):
    path = tmp_path / "small.gif"
    path.write_bytes(two_by_two_gif)
    return path
