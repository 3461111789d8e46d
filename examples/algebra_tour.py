#!/usr/bin/env python3
"""
Example: Run a phrase through all three algebras.

Builds a short progression, combines and inverts it under the harmonic,
Galois and linear interpretations, and writes each result as MIDI.

Usage:
    python examples/algebra_tour.py
    # Creates: examples/output/*.mid and examples/output/moduli/pair.yaml
"""

import logging
from pathlib import Path

from chuk_music_algebra.algebra import GaloisAlgebra, HarmonicAlgebra, LinearAlgebra
from chuk_music_algebra.core import Phrase
from chuk_music_algebra.export import save_phrase_midi
from chuk_music_algebra.storage import ModulusStore

PROGRESSION = """\
C
96
# I - V - vi - IV
1\tC4 G4 E4
1\tG4 D4 B4
1\tA4 E4 C4
1\tF4 C4 A4
"""

MELODY = """\
C
96
1/2\tE5
1/2\tD5
1\tC5
1/2\tB4
1/2\tD5
1\tC5:0.5
"""


def main() -> None:
    """Write one MIDI file per operation."""
    logging.basicConfig(level=logging.INFO)
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    progression = Phrase.parse(PROGRESSION)
    melody = Phrase.parse(MELODY)
    print(f"Progression: {progression}")
    print(f"Melody: {melody}")

    # Harmonic: spectra add and ring-modulate
    harmonic = HarmonicAlgebra()
    write(output_dir / "harmonic_sum.mid", harmonic.sum(progression, melody))
    write(output_dir / "harmonic_product.mid", harmonic.product(progression, melody))
    write(output_dir / "harmonic_inverse.mid", harmonic.inverse(melody))

    # Galois: derive a modulus that pairs two progressions, store it, reuse it
    galois = GaloisAlgebra()
    answer = Phrase.parse("C\n96\n1\tD4 A4\n1\tF4\n1\tE4 B4\n1\tG4\n")
    modulus = galois.modulus_for(progression, answer)
    paired = GaloisAlgebra(galois.generator, modulus)
    store = ModulusStore(output_dir / "moduli")
    store.save("pair", paired.to_settings(), overwrite=True)
    print(f"Stored modulus of degree {modulus.degree}; inverse(progression) == answer: "
          f"{paired.inverse(progression) == answer}")
    write(output_dir / "galois_sum.mid", galois.sum(progression, answer))

    # Linear: matrices and their pseudo-inverse
    linear = LinearAlgebra(seed=0)
    write(output_dir / "linear_product.mid", linear.product(progression, melody))
    write(output_dir / "linear_inverse.mid", linear.inverse(progression))

    print("\nDone! Open the MIDI files in your DAW to hear them.")


def write(path: Path, phrase: Phrase) -> None:
    save_phrase_midi(phrase, path)
    print(f"  Created: {path} ({phrase})")


if __name__ == "__main__":
    main()
