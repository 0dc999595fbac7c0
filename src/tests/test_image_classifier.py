import sys
import os
import unittest
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from leafpack.pics.image_classifier import is_image_file, split_images, is_image_dominant


class TestImageClassifier(unittest.TestCase):
    def test_known_extensions_case_insensitive(self):
        for name in ['a.jpg', 'b.JPEG', 'c.Png', 'd.gif', 'e.bmp', 'f.webp',
                     'g.TIFF', 'h.avif', 'i.heic', 'j.svg']:
            self.assertTrue(is_image_file(name), name)

    def test_non_images(self):
        for name in ['a.txt', 'b', '.hidden', 'c.jpg.txt', 'd.', 'e.psd', 'archive.zip']:
            self.assertFalse(is_image_file(name), name)

    def test_last_extension_wins(self):
        self.assertTrue(is_image_file('photo.tar.jpg'))
        self.assertTrue(is_image_file(os.path.join('some.dir', 'photo.png')))

    def test_split_keeps_order(self):
        images, others = split_images(['b.png', 'x.txt', 'a.jpg', 'y.md'])
        self.assertEqual(images, ['b.png', 'a.jpg'])
        self.assertEqual(others, ['x.txt', 'y.md'])

    def test_image_dominant_is_strict_majority(self):
        self.assertTrue(is_image_dominant(['a.jpg', 'b.png', 'c.txt']))
        self.assertFalse(is_image_dominant(['a.jpg', 'b.txt']))
        self.assertFalse(is_image_dominant(['a.jpg', 'b.txt', 'c.txt']))
        self.assertFalse(is_image_dominant([]))


if __name__ == "__main__":
    unittest.main()
