"""
slabsite/sites/models.py

Result types of the adsorption site search.

AdsorptionSite and AnalysisResult are frozen pydantic models: they are
created once by analyze() and handed to renderers and tables unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class EmptyStructureError(ValueError):
    """
    Raised when a structure has no atoms, or no surface atoms, so no site
    geometry can be derived.

    This is the only condition the site search reports as a failure; every
    other irregular input is absorbed by a default.
    """


# ---------------------------------------------------------------------------
# Site type constants
# ---------------------------------------------------------------------------

class SITE_TYPE:
    """
    Namespace of valid site type strings.

    FCC and HCP are crystallographic refinements of HOLLOW.  The search
    itself labels every three- or four-fold site HOLLOW and records the
    fcc/hcp distinction in the description.
    """
    TOP     = "Top"
    BRIDGE  = "Bridge"
    HOLLOW  = "Hollow"
    FCC     = "fcc"
    HCP     = "hcp"

    @classmethod
    def all(cls) -> set[str]:
        return {cls.TOP, cls.BRIDGE, cls.HOLLOW, cls.FCC, cls.HCP}

    @classmethod
    def is_hollow(cls, site_type: str) -> bool:
        return site_type in {cls.HOLLOW, cls.FCC, cls.HCP}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class AdsorptionSite(BaseModel):
    """
    One candidate adsorption site.

    Fields
    ------
    id : str
        Unique within one AnalysisResult, e.g. "top-63", "brg-54-55".
    site_type : str
        One of SITE_TYPE.
    coordinates : tuple[float, float, float]
        Adsorbate position (Å).
    energy : float
        Binding energy (eV).  More negative is more stable.
    description : str
        Free text, e.g. "On-top of atom #63" or "fcc hollow".
    """

    model_config = ConfigDict(frozen=True)

    id: str
    site_type: str
    coordinates: tuple[float, float, float]
    energy: float = 0.0
    description: str = ""

    @field_validator("site_type")
    @classmethod
    def _valid_site_type(cls, v: str) -> str:
        if v not in SITE_TYPE.all():
            raise ValueError(
                f"site_type must be one of {sorted(SITE_TYPE.all())}, got '{v}'."
            )
        return v

    def with_energy(self, energy: float) -> "AdsorptionSite":
        """Return a copy with the energy set."""
        return self.model_copy(update={"energy": float(energy)})


class AnalysisResult(BaseModel):
    """
    Ranked outcome of one analyze() call.

    sites are ordered by ascending energy (most stable first).
    """

    # model_name is a field here, not pydantic API
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    sites: tuple[AdsorptionSite, ...]
    summary: str
    potential_label: str
    calculation_time: str
    system_id: str | None = None
    model_name: str | None = None

    @property
    def n_sites(self) -> int:
        return len(self.sites)

    @property
    def most_stable(self) -> AdsorptionSite | None:
        return self.sites[0] if self.sites else None

    def to_dataframe(self):
        """
        Return the sites as a pandas DataFrame.

        Columns: id, site_type, x, y, z, energy, description.  Row order is
        the ranking order.

        Returns
        -------
        pandas.DataFrame
        """
        import pandas as pd

        columns = ["id", "site_type", "x", "y", "z", "energy", "description"]
        rows = [
            {
                "id": s.id,
                "site_type": s.site_type,
                "x": s.coordinates[0],
                "y": s.coordinates[1],
                "z": s.coordinates[2],
                "energy": s.energy,
                "description": s.description,
            }
            for s in self.sites
        ]
        return pd.DataFrame(rows, columns=columns)
