"""Built-in periodic table used as the default element-symbol validator."""

from __future__ import annotations

_SYMBOLS = (
    "H,He,"
    "Li,Be,B,C,N,O,F,Ne,"
    "Na,Mg,Al,Si,P,S,Cl,Ar,"
    "K,Ca,Sc,Ti,V,Cr,Mn,Fe,Co,Ni,Cu,Zn,Ga,Ge,As,Se,Br,Kr,"
    "Rb,Sr,Y,Zr,Nb,Mo,Tc,Ru,Rh,Pd,Ag,Cd,In,Sn,Sb,Te,I,Xe,"
    "Cs,Ba,La,Ce,Pr,Nd,Pm,Sm,Eu,Gd,Tb,Dy,Ho,Er,Tm,Yb,Lu,"
    "Hf,Ta,W,Re,Os,Ir,Pt,Au,Hg,Tl,Pb,Bi,Po,At,Rn,"
    "Fr,Ra,Ac,Th,Pa,U,Np,Pu,Am,Cm,Bk,Cf,Es,Fm,Md,No,Lr,"
    "Rf,Db,Sg,Bh,Hs,Mt,Ds,Rg,Cn,Nh,Fl,Mc,Lv,Ts,Og"
).split(",")

# (symbol, atomic number) pairs, ordered by atomic number.
ELEMENTS: tuple[tuple[str, int], ...] = tuple(
    (symbol, number) for number, symbol in enumerate(_SYMBOLS, start=1)
)

ELEMENT_SYMBOLS: frozenset[str] = frozenset(_SYMBOLS)
