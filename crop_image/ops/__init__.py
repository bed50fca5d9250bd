"""Pure operations layer.

Pan/zoom clamping and crop-rectangle arithmetic. Nothing here imports Qt, so
these modules can be exercised without a QApplication.
"""
