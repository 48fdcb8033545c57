"""Observables of the reconstructed tt system."""

import numpy as np

__all__ = ["TT_OBSERVABLES", "tt_observables"]

# Names of the observables, in the order they are computed
TT_OBSERVABLES = (
    "best_rank",
    "reco_status",
    "mass_top_lep",
    "mass_top_had",
    "mass_w_had",
    "pt_top_lep",
    "pt_top_had",
    "mass_tt",
    "pt_tt",
    "rapidity_tt",
    "dr_tt",
    "cos_top_lep_tt",
)


def tt_observables(result):
    """Computes the observables of the reconstructed tt system.

    If the reconstruction failed, every observable but the status is set
    to zero.

    Parameters
    ----------
    result : ReconstructionResult
        Outcome of the reconstruction of one event

    Returns
    -------
    Dict[str, float]
        Dictionary which maps each observable name onto its value
    """
    out = dict.fromkeys(TT_OBSERVABLES, 0.0)
    out["reco_status"] = int(result.status)
    if not result.success:
        return out

    top_lep, top_had = result.top_lep_p4, result.top_had_p4
    tt = top_lep + top_had

    out["best_rank"] = float(result.rank)
    out["mass_top_lep"] = float(top_lep.mass)
    out["mass_top_had"] = float(top_had.mass)
    out["mass_w_had"] = float(result.w_had_p4.mass)
    out["pt_top_lep"] = float(top_lep.pt)
    out["pt_top_had"] = float(top_had.pt)
    out["mass_tt"] = float(tt.mass)
    out["pt_tt"] = float(tt.pt)
    out["rapidity_tt"] = float(tt.rapidity)
    out["dr_tt"] = float(top_lep.deltaR(top_had))

    # Angle between the leptonic top in the tt rest frame and the tt direction
    boosted = top_lep.boostCM_of_p4(tt)
    p_boosted = np.array([boosted.px, boosted.py, boosted.pz])
    p_tt = np.array([tt.px, tt.py, tt.pz])
    norm = np.linalg.norm(p_boosted) * np.linalg.norm(p_tt)
    out["cos_top_lep_tt"] = float(np.dot(p_boosted, p_tt) / norm) if norm > 0 else 0.0

    return out
