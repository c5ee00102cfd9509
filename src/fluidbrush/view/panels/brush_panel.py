"""
Brushing Control Panel
"""
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QButtonGroup,
    QDoubleSpinBox, QGroupBox, QFormLayout
)
from PySide6.QtCore import Qt

from fluidbrush import config
from fluidbrush.controller.brush import BrushController
from fluidbrush.model.state import Axis, StateChange, Store

INSTRUCTIONS = (
    "Pick the slicing axis, then use the Up / Down arrow keys to move the "
    "slab through the fluid. Particles below the threshold (percent of the "
    "maximum concentration) are hidden in every view."
)


class BrushControlPanel(QWidget):
    def __init__(self, store: Store, controller: BrushController) -> None:
        super().__init__()
        self.store = store
        self.controller = controller

        layout = QVBoxLayout(self)

        # --- Axis Group ---
        grp_axis = QGroupBox("Slicing Axis")
        axis_row = QHBoxLayout(grp_axis)

        self.axis_group = QButtonGroup(self)
        self.axis_group.setExclusive(True)
        self.axis_buttons: dict[Axis, QPushButton] = {}
        for axis in Axis:
            btn = QPushButton(axis.value.upper())
            btn.setCheckable(True)
            # Arrow keys belong to the brush, not to button focus navigation
            btn.setFocusPolicy(Qt.NoFocus)
            btn.clicked.connect(lambda _checked=False, a=axis: self.controller.set_axis(a))
            self.axis_group.addButton(btn)
            self.axis_buttons[axis] = btn
            axis_row.addWidget(btn)

        layout.addWidget(grp_axis)

        # --- Filter Group ---
        grp_filter = QGroupBox("Filter")
        form = QFormLayout(grp_filter)

        self.threshold_spin = QDoubleSpinBox()
        self.threshold_spin.setRange(config.THRESHOLD_MIN, config.THRESHOLD_MAX)
        self.threshold_spin.setDecimals(1)
        self.threshold_spin.setSingleStep(1.0)
        self.threshold_spin.setSuffix(" %")
        self.threshold_spin.setKeyboardTracking(False)
        self.threshold_spin.valueChanged.connect(self.controller.set_threshold)
        form.addRow("Concentration threshold:", self.threshold_spin)

        layout.addWidget(grp_filter)

        # --- Status Info ---
        self.lbl_brush = QLabel("")
        self.lbl_brush.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.lbl_brush)

        self.lbl_stats = QLabel("No data loaded.")
        self.lbl_stats.setAlignment(Qt.AlignCenter)
        self.lbl_stats.setStyleSheet("color: gray;")
        layout.addWidget(self.lbl_stats)

        lbl_help = QLabel(INSTRUCTIONS)
        lbl_help.setWordWrap(True)
        lbl_help.setStyleSheet("color: gray;")
        layout.addWidget(lbl_help)

        layout.addStretch()

        self.store.changed.connect(self.on_state_changed)
        self.load_from_state()

    # --- SLOTS ---

    def on_state_changed(self, change: StateChange) -> None:
        self.load_from_state()

    def load_from_state(self) -> None:
        """Mirror the Store into the widgets without feeding the change back."""
        interaction = self.store.interaction

        self.axis_buttons[interaction.brushed_axis].setChecked(True)

        self.threshold_spin.blockSignals(True)
        try:
            self.threshold_spin.setValue(interaction.threshold)
        finally:
            self.threshold_spin.blockSignals(False)

        self.lbl_brush.setText(
            f"<b>{interaction.brushed_axis.value} = {interaction.brushed_coord:.2f}</b>"
        )

        particles, bounds = self.store.particles, self.store.bounds
        if particles is None or bounds is None:
            self.lbl_stats.setText("No data loaded.")
        else:
            self.lbl_stats.setText(
                f"Particles: {len(particles)}\n"
                f"Max concentration: {bounds.max_c:.3f}"
            )

    def shutdown(self) -> None:
        self.store.changed.disconnect(self.on_state_changed)
