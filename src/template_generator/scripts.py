"""Static C# script bodies emitted into the workspace.

The bodies are opaque to the pipeline: no substitution happens. Each file
declares exactly one MonoBehaviour named after the file.
"""
from __future__ import annotations

PLAYER_CONTROLLER = """using UnityEngine;
using UnityEngine.InputSystem;

[RequireComponent(typeof(Rigidbody))]
[RequireComponent(typeof(PlayerInput))]
public class PlayerController : MonoBehaviour
{
    [Header("Movement")]
    public float moveSpeed = 5f;

    [Header("Stats")]
    public float maxHealth = 100f;
    public float currentHealth;

    [Header("Combat")]
    public GameObject projectilePrefab;
    public Transform firePoint;

    private Rigidbody rb;
    private Vector2 moveInput;
    private Vector3 lookPosition;
    private Camera mainCamera;
    private UIManager uiManager;

    private void Awake()
    {
        rb = GetComponent<Rigidbody>();
        mainCamera = Camera.main;
        currentHealth = maxHealth;
    }

    private void Start()
    {
        if (GameManager.Instance != null)
        {
            uiManager = GameManager.Instance.GetComponent<UIManager>();
        }
        if (uiManager != null)
        {
            uiManager.UpdateHealthBar(currentHealth, maxHealth);
        }
    }

    public void OnMove(InputValue value) { moveInput = value.Get<Vector2>(); }

    public void OnLook(InputValue value)
    {
        Ray ray = mainCamera.ScreenPointToRay(value.Get<Vector2>());
        if (Physics.Raycast(ray, out RaycastHit hit, Mathf.Infinity, LayerMask.GetMask("Ground")))
        {
            lookPosition = hit.point;
        }
    }

    public void OnFire()
    {
        if (projectilePrefab != null && firePoint != null)
        {
            Instantiate(projectilePrefab, firePoint.position, firePoint.rotation);
        }
    }

    private void FixedUpdate()
    {
        rb.velocity = new Vector3(moveInput.x, 0f, moveInput.y) * moveSpeed;
    }

    private void Update()
    {
        Vector3 direction = (lookPosition - transform.position).normalized;
        direction.y = 0;
        if (direction != Vector3.zero)
        {
            transform.rotation = Quaternion.LookRotation(direction);
        }
        if (uiManager != null)
        {
            uiManager.UpdateCoordinates(transform.position);
        }
    }

    public void TakeDamage(float amount)
    {
        currentHealth -= amount;
        if (uiManager != null) uiManager.UpdateHealthBar(currentHealth, maxHealth);
        if (currentHealth <= 0) Die();
    }

    private void Die()
    {
        Debug.Log("Player has died.");
        if (GameManager.Instance != null) GameManager.Instance.ReloadGame();
        Destroy(gameObject);
    }
}
"""

GAME_MANAGER = """using UnityEngine;
using UnityEngine.SceneManagement;

public class GameManager : MonoBehaviour
{
    public static GameManager Instance { get; private set; }

    private void Awake()
    {
        if (Instance == null)
        {
            Instance = this;
            DontDestroyOnLoad(gameObject);
        }
        else
        {
            Destroy(gameObject);
        }
    }

    public void StartGame() { SceneManager.LoadScene(SceneManager.GetActiveScene().buildIndex + 1); }

    public void ReloadGame() { SceneManager.LoadScene(SceneManager.GetActiveScene().name); }

    public void QuitGame()
    {
#if UNITY_EDITOR
        UnityEditor.EditorApplication.isPlaying = false;
#else
        Application.Quit();
#endif
    }
}
"""

CAMERA_FOLLOW = """using UnityEngine;

public class CameraFollow : MonoBehaviour
{
    public Transform target;
    public Vector3 offset = new Vector3(0f, 10f, -5f);
    public float smoothSpeed = 0.125f;

    void LateUpdate()
    {
        if (target == null) return;
        Vector3 desiredPosition = target.position + offset;
        transform.position = Vector3.Lerp(transform.position, desiredPosition, smoothSpeed);
        transform.LookAt(target.position);
    }
}
"""

ENEMY_AI = """using UnityEngine;

public class EnemyAI : MonoBehaviour
{
    public float moveSpeed = 3f;
    public float health = 50f;
    public Transform playerTarget;

    void Update()
    {
        if (playerTarget != null)
        {
            transform.position = Vector3.MoveTowards(transform.position, playerTarget.position, moveSpeed * Time.deltaTime);
            transform.LookAt(playerTarget);
        }
    }

    public void TakeDamage(float amount)
    {
        health -= amount;
        if (health <= 0) Destroy(gameObject);
    }
}
"""

PROJECTILE = """using UnityEngine;

[RequireComponent(typeof(Rigidbody)), RequireComponent(typeof(Collider))]
public class Projectile : MonoBehaviour
{
    public float speed = 20f;
    public float damage = 10f;
    public float lifetime = 3f;

    void Start()
    {
        GetComponent<Rigidbody>().velocity = transform.forward * speed;
        Destroy(gameObject, lifetime);
    }

    void OnTriggerEnter(Collider other)
    {
        if (other.CompareTag("Enemy"))
        {
            other.GetComponent<EnemyAI>()?.TakeDamage(damage);
            Destroy(gameObject);
        }
    }
}
"""

UI_MANAGER = """using UnityEngine;
using UnityEngine.UI;
using TMPro;

public class UIManager : MonoBehaviour
{
    [Header("Menu Elements")]
    public GameObject mainMenuPanel;

    [Header("HUD Elements")]
    public GameObject hudPanel;
    public Slider healthBar;
    public TextMeshProUGUI coordinatesText;

    public void UpdateHealthBar(float currentHealth, float maxHealth)
    {
        if (healthBar != null)
        {
            healthBar.maxValue = maxHealth;
            healthBar.value = currentHealth;
        }
    }

    public void UpdateCoordinates(Vector3 playerPosition)
    {
        if (coordinatesText != null)
        {
            coordinatesText.text = $"X: {playerPosition.x:F1} | Z: {playerPosition.z:F1}";
        }
    }
}
"""

# Emission order is the declaration order below.
SCRIPT_ARTIFACTS: dict[str, str] = {
    "PlayerController.cs": PLAYER_CONTROLLER,
    "GameManager.cs": GAME_MANAGER,
    "CameraFollow.cs": CAMERA_FOLLOW,
    "EnemyAI.cs": ENEMY_AI,
    "Projectile.cs": PROJECTILE,
    "UIManager.cs": UI_MANAGER,
}
