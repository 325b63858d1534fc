"""Move unmerged Miller indices to the reciprocal asymmetric unit."""

import gemmi

from cif2mtz.errors import ConversionError


class HklMover(object):
    """Reduce (h, k, l) to the reciprocal ASU of a space group.

    move_to_asu returns the ASU index and the ISYM code as used in unmerged
    MTZ files: 2*n-1 for the n-th symmetry operator applied to (h, k, l),
    2*n for the Friedel mate."""

    def __init__(self, spacegroup):
        if spacegroup is None:
            raise ConversionError("space group is required for unmerged data")
        self.spacegroup = spacegroup
        self._asu = gemmi.ReciprocalAsu(spacegroup)
        self._ops = spacegroup.operations()

    def move_to_asu(self, hkl):
        asu_hkl, isym = self._asu.to_asu(list(hkl), self._ops)
        return tuple(asu_hkl), isym
