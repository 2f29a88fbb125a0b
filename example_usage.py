"""
Simple usage example for ZacAI

This demonstrates basic usage of the ZacAI agent.
Run this after installation to see ZacAI in action.
"""

from zacai import ZacAgent


def main():
    print("=" * 60)
    print("ZacAI Simple Example")
    print("=" * 60)
    print()

    agent = ZacAgent()
    print("✓ Agent initialized!\n")

    # Example 1: Arithmetic with shown working
    print("=" * 60)
    print("\n📝 Example 1: Arithmetic\n")
    response = agent.submit("3×3+3")
    print(f"Answer ({response.confidence:.0%}):\n{response.text}\n")

    # Example 2: A word the agent may have to look up
    print("=" * 60)
    print("\n📝 Example 2: Vocabulary\n")
    response = agent.submit("define algorithm")
    print(f"Answer ({response.confidence:.0%}):\n{response.text}\n")

    # Example 3: Personal memory
    print("=" * 60)
    print("\n📝 Example 3: Personal memory\n")
    print(agent.ask("My name is Sam and I like chess"))
    print(agent.ask("What is my name?"))

    # Example 4: Statistics
    print("=" * 60)
    print("\n📊 Example 4: Statistics\n")
    stats = agent.get_statistics()
    print(f"Knowledge entries: {stats['knowledge']['total_entries']}")
    print(f"Conversation turns: {stats['conversation']['total_turns']}")

    print("\n" + "=" * 60)
    print("\n💡 To run the full CLI: zacai  (or: python -m zacai)")
    print("=" * 60)


if __name__ == "__main__":
    main()
