import runpy
import traceback

def main():
    try:
        # Equivalent to: python -m radmon.dev.run_monitor
        runpy.run_module("radmon.dev.run_monitor", run_name="__main__")
    except Exception:
        traceback.print_exc()
        input("\nPress Enter to exit...")

if __name__ == "__main__":
    main()
