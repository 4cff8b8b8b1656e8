import unittest
from menu.logic.ingredients.normalizer import (
    is_known_unit,
    normalize_label_key,
    normalize_unit,
    singularize_fr,
    strip_diacritics,
)


class TestUnitNormalization(unittest.TestCase):

    def test_aliases(self):
        self.assertEqual(normalize_unit("Grammes"), "g")
        self.assertEqual(normalize_unit("kilos"), "kg")
        self.assertEqual(normalize_unit("Litre"), "l")
        self.assertEqual(normalize_unit("c. à soupe"), "càs")
        self.assertEqual(normalize_unit("cuillères à café"), "càc")
        self.assertEqual(normalize_unit("pièces"), "pc")
        self.assertEqual(normalize_unit("pincées"), "pincée")

    def test_unknown_unit_comes_back_cleaned(self):
        self.assertEqual(normalize_unit("Botte"), "botte")
        self.assertEqual(normalize_unit(""), "")
        self.assertEqual(normalize_unit(None), "")

    def test_is_known_unit(self):
        self.assertTrue(is_known_unit("CL"))
        self.assertTrue(is_known_unit("(pce)"))
        self.assertFalse(is_known_unit("oeufs"))


class TestLabelKey(unittest.TestCase):

    def test_accents_case_and_ligatures(self):
        self.assertEqual(strip_diacritics("Crème brûlée"), "Creme brulee")
        self.assertEqual(normalize_label_key("Œufs"), "oeuf")
        self.assertEqual(normalize_label_key("œufs"), normalize_label_key("oeufs"))

    def test_leading_partitive_and_article(self):
        self.assertEqual(normalize_label_key("des oeufs"), "oeuf")
        self.assertEqual(normalize_label_key("la crème fraîche"), "creme fraiche")
        self.assertEqual(normalize_label_key("de la farine"), "farine")

    def test_embedded_partitive(self):
        self.assertEqual(normalize_label_key("pot de crème"), "pot creme")
        self.assertEqual(normalize_label_key("pommes de terre"), "pomme terre")

    def test_singular_and_plural_share_a_key(self):
        self.assertEqual(normalize_label_key("tomates"), normalize_label_key("tomate"))
        self.assertEqual(normalize_label_key("choux"), "chou")

    def test_empty_label(self):
        self.assertEqual(normalize_label_key(""), "")
        self.assertEqual(normalize_label_key("   "), "")

    def test_singularize_exceptions(self):
        self.assertEqual(singularize_fr("jus"), "jus")
        self.assertEqual(singularize_fr("radis"), "radis")
        self.assertEqual(singularize_fr("couscous"), "couscous")
        self.assertEqual(singularize_fr("gateaux"), "gateaux")
        self.assertEqual(singularize_fr("oeufs"), "oeuf")


if __name__ == '__main__':
    unittest.main()
